"""
Pytest configuration and fixtures.
"""
import uuid
import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient
from unittest.mock import patch

from app.core.auth import SessionManager
from app.core.database import Base, build_engine, get_db
from app.main import app
from app.services.mail_service import MailService, get_mail_service

# Import all models to ensure they register with Base.metadata
from app.models import (  # noqa: F401
    User,
    AuthSession,
    HiradcAnalysis,
    FtaAnalysis,
    EtaAnalysis,
    CcaAnalysis,
    K3Calculation,
    ContactMessage,
    ActivityLog,
)

# Use file-based SQLite for testing (more reliable than in-memory)
TEST_DATABASE_URL = "sqlite:///./test_smart_osh.db"

test_engine = build_engine(TEST_DATABASE_URL)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEST_PASSWORD = "Sup3r-secret!"


class RecordingMailService(MailService):
    """Mail service that records messages instead of talking to SMTP."""

    def __init__(self):
        super().__init__()
        self.sent = []

    def send(self, message):
        self.sent.append(message)
        return True


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create all tables once per test session and drop them afterwards."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function", autouse=True)
def disable_openai():
    """Disable OpenAI for all tests by patching the settings."""
    with patch("app.core.config.settings.OPENAI_API_KEY", None):
        yield


@pytest.fixture(scope="function")
def mailer():
    return RecordingMailService()


@pytest.fixture(scope="function")
def client(mailer):
    """
    Test client with the database and mail dependencies overridden.

    The session manager is installed on app.state directly, as the lifespan
    would at startup, so tests never touch the development database.
    """
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_service] = lambda: mailer
    app.state.session_manager = SessionManager(ttl_hours=24)

    yield TestClient(app)

    app.state.session_manager.close()
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db_session():
    """Provide a database session for tests that need direct DB access."""
    db = TestingSessionLocal()
    try:
        yield db
        db.rollback()
    finally:
        db.close()


def _unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}@example.com"


def _register(client, name: str = "Safety Officer", email: str = None, password: str = TEST_PASSWORD):
    return client.post("/api/v1/auth/register", json={
        "name": name,
        "email": email or _unique_email(),
        "password": password,
        "password_confirm": password,
    })


@pytest.fixture
def unique_email():
    """Factory for email addresses no other test has registered."""
    return _unique_email


@pytest.fixture
def register_user(client):
    """Register a user through the API and return the response."""
    def _register_user(**kwargs):
        return _register(client, **kwargs)
    return _register_user


@pytest.fixture(scope="function")
def auth_headers(client):
    """Bearer headers for a freshly registered user."""
    response = _register(client)
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture(scope="function")
def other_auth_headers(client):
    """Bearer headers for a second, unrelated user."""
    response = _register(client, name="Other Officer")
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}
