import pytest
from fastapi.testclient import TestClient

from helpers import ScriptedRewriteService
from resume.config import TailoringConfig
from webapp.app import create_app
from webapp.config import Settings

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_path=str(tmp_path / "app.db"),
        log_dir=str(tmp_path / "logs"),
        secret_key="test-secret",
        admin_email=ADMIN_EMAIL,
        llm_provider="openai",
        debug=False,
    )


@pytest.fixture
def rewrite_service():
    return ScriptedRewriteService()


@pytest.fixture
def tailoring_config():
    return TailoringConfig(retry_base_delay=0, retry_max_delay=0, attempt_timeout=5.0)


@pytest.fixture
def app(settings, tailoring_config, rewrite_service):
    return create_app(settings=settings, tailoring_config=tailoring_config, rewrite_service=rewrite_service)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
