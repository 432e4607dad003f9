"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Dict, Any

from jobly.database import get_engine, init_database, run_query
from jobly.logger import StructuredLogger
from jobly.storage import JobStore


@pytest.fixture
def db_url(tmp_path) -> str:
    """URL of a fresh SQLite database file."""
    return f"sqlite:///{tmp_path / 'jobly_test.db'}"


@pytest.fixture
def engine(db_url):
    """Engine with an empty schema."""
    engine = get_engine(db_url)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded_engine(engine):
    """Engine with companies c1-c3 and jobs j1-j3."""
    with engine.begin() as conn:
        for n in (1, 2, 3):
            run_query(
                conn,
                """INSERT INTO companies (handle, name, num_employees, description, logo_url)
                   VALUES ($1, $2, $3, $4, $5)""",
                [f"c{n}", f"C{n}", n, f"Desc{n}", f"http://c{n}.img"],
            )
        for n in (1, 2, 3):
            run_query(
                conn,
                """INSERT INTO jobs (title, salary, equity, company_handle)
                   VALUES ($1, $2, $3, $4)""",
                [f"j{n}", n * 100, f"0.{n}", f"c{n}"],
            )
    return engine


@pytest.fixture
def test_logger(tmp_path) -> StructuredLogger:
    """Quiet logger writing only to a temp directory."""
    return StructuredLogger(
        name="jobly-test",
        level="DEBUG",
        log_dir=tmp_path / "logs",
        enable_console=False,
    )


@pytest.fixture
def store(seeded_engine, test_logger) -> JobStore:
    return JobStore(seeded_engine, logger=test_logger)


@pytest.fixture
def empty_store(engine, test_logger) -> JobStore:
    return JobStore(engine, logger=test_logger)


@pytest.fixture
def new_job() -> Dict[str, Any]:
    """Valid job data for company c1."""
    return {
        "title": "testTitle",
        "salary": 70000,
        "equity": "0",
        "companyHandle": "c1",
    }
