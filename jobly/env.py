import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///jobly.db"
TEST_DATABASE_URL = "sqlite:///jobly_test.db"


def load_env() -> None:
    """Load .env from project root if present.
    Values already set in the environment win over the file.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


def get_database_url() -> str:
    """
    Database URL used by the store.

    DATABASE_URL takes precedence; otherwise JOBLY_ENV=test selects the
    test database and anything else the default one.
    """
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if os.getenv("JOBLY_ENV") == "test":
        return TEST_DATABASE_URL
    return DEFAULT_DATABASE_URL


def get_log_level() -> str:
    return os.getenv("JOBLY_LOG_LEVEL", "INFO").upper()
