"""
Readiness check: database, session manager and optional integrations.
"""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.models.auth_session import AuthSession

logger = logging.getLogger(__name__)

router = APIRouter()


def _session_manager_open(request: Request) -> bool:
    manager = getattr(request.app.state, "session_manager", None)
    return bool(manager and manager.is_open)


@router.get("/health")
async def health_check(request: Request, db: Session = Depends(get_db)):
    """
    503 when the database is unreachable. Otherwise reports each component;
    `ok` is false while the session manager is closed (logins would fail).

    Mail and AI are optional: without them emails are dropped and HIRADC
    narratives come from the built-in template.
    """
    try:
        db.execute(text("SELECT 1")).fetchone()
        active_sessions = (
            db.query(AuthSession)
            .filter(AuthSession.is_active == True, AuthSession.expires_at > datetime.now(timezone.utc))  # noqa: E712
            .count()
        )
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed"
        )

    sessions_ok = _session_manager_open(request)
    return {
        "ok": sessions_ok,
        "db": True,
        "sessions": sessions_ok,
        "active_sessions": active_sessions,
        "mail": settings.is_smtp_configured(),
        "ai": settings.is_openai_available(),
        "environment": settings.APP_ENV,
    }
