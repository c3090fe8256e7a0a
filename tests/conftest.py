import pytest

from database.db_manager import DatabaseManager
from resume.config import TailoringConfig


@pytest.fixture
def db(tmp_path):
    return DatabaseManager(str(tmp_path / "test.db"))


@pytest.fixture
def user(db):
    return db.create_user("jane@example.com", "not-a-real-hash", "Jane")


@pytest.fixture
def fast_config():
    """Pipeline config without backoff sleeps"""
    return TailoringConfig(retry_base_delay=0, retry_max_delay=0, attempt_timeout=5.0)
