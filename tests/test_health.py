"""
Tests for health check endpoints and application lifespan.
"""
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import patch

from app.core.database import build_engine
from app.main import app


def test_health_endpoint_returns_ok(client):
    """Test that /api/v1/health returns ok when DB is healthy."""
    response = client.get("/api/v1/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["ok"] is True
    assert data["db"] is True
    assert data["sessions"] is True
    assert data["ai"] is False
    assert "environment" in data


def test_health_endpoint_with_db_failure(monkeypatch):
    """Test that /api/v1/health returns 503 when DB is down."""
    from app.core.database import get_db
    from sqlalchemy.exc import SQLAlchemyError

    class FailingSession:
        def execute(self, *args, **kwargs):
            raise SQLAlchemyError("Simulated DB failure")

    def failing_get_db():
        yield FailingSession()

    app.dependency_overrides[get_db] = failing_get_db

    try:
        client = TestClient(app)
        response = client.get("/api/v1/health")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert "detail" in response.json()
    finally:
        app.dependency_overrides.clear()


def test_health_endpoint_trace_id_header(client):
    """RequestLoggingMiddleware adds an X-Trace-ID header, reusing an incoming one."""
    response = client.get("/api/v1/health")
    assert len(response.headers["X-Trace-ID"]) > 0

    response = client.get("/api/v1/health", headers={"X-Trace-ID": "ui-trace-42"})
    assert response.headers["X-Trace-ID"] == "ui-trace-42"


def test_liveness_and_root(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert "docs" in client.get("/").json()


def test_lifespan_opens_and_closes_session_manager():
    """Startup installs an open session manager on app.state; shutdown closes it."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with patch("app.main.engine", engine), \
            patch("app.main.SessionLocal", session_factory), \
            patch("app.main.run_migrations") as run_migrations:
        with TestClient(app) as client:
            manager = client.app.state.session_manager
            assert manager.is_open
            run_migrations.assert_called_once()

        assert manager.is_open is False


def test_health_reports_closed_session_manager(client, auth_headers):
    assert client.get("/api/v1/health").json()["active_sessions"] >= 1

    client.app.state.session_manager.close()
    data = client.get("/api/v1/health").json()
    assert data["ok"] is False
    assert data["sessions"] is False
