"""
Tests for database.py - schema, engine setup and $n query binding.
"""

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

from jobly.database import Company, Job, get_engine, get_session, init_database, run_query


class TestDatabaseInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        """Test that init_database creates the database file."""
        db_path = tmp_path / "test.db"
        assert not db_path.exists()

        init_database(get_engine(f"sqlite:///{db_path}"))

        assert db_path.exists()

    def test_init_creates_tables(self, engine):
        """Test that init_database creates the companies and jobs tables."""
        assert set(inspect(engine).get_table_names()) == {"companies", "jobs"}

        session = get_session(engine)
        assert session.query(Job).count() == 0
        session.close()

    def test_engine_creates_parent_directories(self, tmp_path):
        """Test that get_engine creates parent directories if missing."""
        db_path = tmp_path / "nested" / "dir" / "test.db"
        assert not db_path.parent.exists()

        init_database(get_engine(f"sqlite:///{db_path}"))

        assert db_path.exists()

    def test_default_url_from_environment(self, tmp_path, monkeypatch):
        db_path = tmp_path / "env.db"
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_path}")

        engine = get_engine()

        assert engine.url.database == str(db_path)


class TestConstraints:
    """Schema-level rules the store relies on."""

    @pytest.fixture
    def db_session(self, seeded_engine):
        session = get_session(seeded_engine)
        yield session
        session.close()

    def test_title_is_unique(self, db_session):
        db_session.add(Job(title="j1", salary=1, company_handle="c2"))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_company_must_exist(self, db_session):
        db_session.add(Job(title="orphan", salary=1, company_handle="missing"))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_salary_cannot_be_negative(self, db_session):
        db_session.add(Job(title="negative", salary=-1, company_handle="c1"))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_equity_cannot_exceed_one(self, seeded_engine):
        with pytest.raises(IntegrityError):
            with seeded_engine.begin() as conn:
                run_query(
                    conn,
                    "INSERT INTO jobs (title, equity, company_handle) VALUES ($1, $2, $3)",
                    ["rich", "1.5", "c1"],
                )

    @pytest.mark.parametrize("equity", ["-0.5", "-0.0001"])
    def test_equity_cannot_be_negative(self, seeded_engine, equity):
        with pytest.raises(IntegrityError):
            with seeded_engine.begin() as conn:
                run_query(
                    conn,
                    "INSERT INTO jobs (title, equity, company_handle) VALUES ($1, $2, $3)",
                    ["negative", equity, "c1"],
                )

    def test_equity_stored_as_written(self, seeded_engine):
        with seeded_engine.begin() as conn:
            run_query(
                conn,
                "INSERT INTO jobs (title, equity, company_handle) VALUES ($1, $2, $3)",
                ["precise", "0.10", "c1"],
            )
            stored = run_query(conn, "SELECT equity FROM jobs WHERE title = $1", ["precise"]).scalar()

        assert stored == "0.10"

    def test_deleting_company_removes_its_jobs(self, seeded_engine):
        with seeded_engine.begin() as conn:
            run_query(conn, "DELETE FROM companies WHERE handle = $1", ["c1"])
            remaining = run_query(conn, "SELECT title FROM jobs ORDER BY title").scalars().all()

        assert remaining == ["j2", "j3"]

    def test_company_jobs_relationship(self, db_session):
        company = db_session.get(Company, "c2")
        assert [job.title for job in company.jobs] == ["j2"]


class TestRunQuery:
    """Test $n placeholder binding."""

    def test_binds_values_by_position(self, seeded_engine):
        with seeded_engine.begin() as conn:
            rows = run_query(
                conn,
                "SELECT title FROM jobs WHERE salary >= $1 AND salary <= $2 ORDER BY title",
                [150, 250],
            ).scalars().all()

        assert rows == ["j2"]

    def test_double_digit_placeholders(self, seeded_engine):
        """$11 binds the eleventh value, not $1 followed by a literal 1."""
        values = list(range(1, 11)) + [300]
        placeholders = ", ".join(f"${idx}" for idx in range(1, 12))
        with seeded_engine.begin() as conn:
            rows = run_query(
                conn,
                f"SELECT title FROM jobs WHERE salary IN ({placeholders})",
                values,
            ).scalars().all()

        assert rows == ["j3"]

    def test_ilike_is_case_insensitive_on_sqlite(self, seeded_engine):
        with seeded_engine.begin() as conn:
            rows = run_query(conn, "SELECT title FROM jobs WHERE title ILIKE $1", ["J3"]).scalars().all()

        assert rows == ["j3"]

    def test_no_values(self, seeded_engine):
        with seeded_engine.begin() as conn:
            count = run_query(conn, "SELECT COUNT(*) FROM jobs").scalar()

        assert count == 3
