"""
Session authentication for protected endpoints.

A single SessionManager is created at application startup and closed at
shutdown. Endpoints receive an explicit AuthContext instead of reading
ambient user state.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import generate_session_token, hash_token
from app.models.auth_session import AuthSession
from app.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@dataclass
class AuthContext:
    """The authenticated user of the current request."""
    user: User
    session_id: int

    @property
    def user_id(self) -> int:
        return self.user.id


class SessionManager:
    """Creates, resolves and revokes login sessions."""

    def __init__(self, ttl_hours: int = 24):
        self.ttl = timedelta(hours=ttl_hours)
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        self._open = False
        logger.info("Session manager closed")

    def create_session(self, db: Session, user: User) -> str:
        """Open a session for the user and return the raw bearer token (never stored)."""
        token = generate_session_token()
        session = AuthSession(
            user_id=user.id,
            token_hash=hash_token(token),
            is_active=True,
            expires_at=_utcnow() + self.ttl,
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        logger.info(f"Opened session id={session.id} for user id={user.id}")
        return token

    def resolve(self, db: Session, token: str) -> Optional[AuthContext]:
        """Return the AuthContext for a valid token, None otherwise."""
        if not token:
            return None
        session = (
            db.query(AuthSession)
            .filter(AuthSession.token_hash == hash_token(token), AuthSession.is_active == True)  # noqa: E712
            .first()
        )
        if not session:
            return None
        if _as_aware(session.expires_at) <= _utcnow():
            logger.debug(f"Session id={session.id} expired")
            return None
        session.last_used_at = _utcnow()
        db.commit()
        return AuthContext(user=session.user, session_id=session.id)

    def revoke(self, db: Session, token: str) -> bool:
        session = db.query(AuthSession).filter(AuthSession.token_hash == hash_token(token)).first()
        if not session or not session.is_active:
            return False
        session.is_active = False
        db.commit()
        logger.info(f"Revoked session id={session.id}")
        return True

    def revoke_all(self, db: Session, user_id: int) -> int:
        """Deactivate every session of a user (after a password reset)."""
        count = (
            db.query(AuthSession)
            .filter(AuthSession.user_id == user_id, AuthSession.is_active == True)  # noqa: E712
            .update({AuthSession.is_active: False}, synchronize_session=False)
        )
        db.commit()
        return count

    def purge_expired(self, db: Session) -> int:
        count = (
            db.query(AuthSession)
            .filter(AuthSession.expires_at <= _utcnow())
            .delete(synchronize_session=False)
        )
        db.commit()
        return count


def get_session_manager(request: Request) -> SessionManager:
    """Dependency returning the process-wide session manager."""
    manager = getattr(request.app.state, "session_manager", None)
    if manager is None or not manager.is_open:
        logger.error("Session manager is not initialised")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable",
        )
    return manager


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> str:
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_auth_context(
    token: str = Depends(get_bearer_token),
    manager: SessionManager = Depends(get_session_manager),
    db: Session = Depends(get_db),
) -> AuthContext:
    """
    Dependency to verify the bearer token and return the AuthContext.

    Raises:
        HTTPException: 401 if the token is unknown, revoked or expired
    """
    context = manager.resolve(db, token)
    if context is None:
        logger.warning(f"Invalid or expired session token attempted: {token[:9]}...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context


def build_session_manager() -> SessionManager:
    return SessionManager(ttl_hours=settings.SESSION_TTL_HOURS)
