"""
Database schema and connection management.

Uses SQLAlchemy for the companies/jobs schema. The store issues plain SQL
written with $1, $2, ... positional placeholders; run_query binds those
through SQLAlchemy so the same statements run on PostgreSQL and SQLite.
"""

import re
from pathlib import Path
from typing import Any, Sequence

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import Connection, CursorResult, Engine, make_url
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from .env import get_database_url

Base = declarative_base()

_PLACEHOLDER = re.compile(r"\$(\d+)")

# SQLite has no ILIKE; its LIKE is already case-insensitive for ASCII.
# equity is TEXT there, and TEXT always sorts above numbers.
_SQLITE_REWRITES = (
    (" ILIKE ", " LIKE "),
    ("equity > 0", "CAST(equity AS REAL) > 0"),
)


class Company(Base):
    """Company that posts jobs."""

    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"))
    description = Column(Text, nullable=False, default="")
    logo_url = Column(Text)

    jobs = relationship("Job", back_populates="company", passive_deletes=True)


class Job(Base):
    """Job posting model. title is the natural key used for lookups."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False, unique=True)
    salary = Column(Integer, CheckConstraint("salary >= 0"))
    # TEXT on SQLite: NUMERIC affinity there would store equity as a float
    equity = Column(
        Numeric().with_variant(Text, "sqlite"),
        CheckConstraint("CAST(equity AS REAL) >= 0 AND CAST(equity AS REAL) <= 1.0"),
    )
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )

    company = relationship("Company", back_populates="jobs")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(url: str | None = None) -> Engine:
    """
    Create an engine for the given URL (default: configured DATABASE_URL).

    SQLite file databases get their parent directory created and
    foreign key enforcement switched on for every connection.
    """
    url = url or get_database_url()
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_database(engine: Engine) -> None:
    """
    Create the companies and jobs tables if they do not exist.

    Args:
        engine: SQLAlchemy engine
    """
    Base.metadata.create_all(engine)


def get_session(engine: Engine):
    """
    Get database session.

    Args:
        engine: SQLAlchemy engine

    Returns:
        SQLAlchemy session
    """
    Session = sessionmaker(bind=engine)
    return Session()


def run_query(conn: Connection, query: str, values: Sequence[Any] = ()) -> CursorResult:
    """
    Execute SQL written with $n positional placeholders.

    values[0] binds $1, values[1] binds $2, and so on. On SQLite the
    statement is adjusted with _SQLITE_REWRITES first.
    """
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    sql = _PLACEHOLDER.sub(r":p\1", query)
    if conn.dialect.name == "sqlite":
        for old, new in _SQLITE_REWRITES:
            sql = sql.replace(old, new)
    return conn.execute(text(sql), params)
