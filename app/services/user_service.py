"""
User accounts: registration, password login and password reset.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import generate_reset_token, hash_password, verify_password
from app.models.user import User
from app.services.mail_service import MailDeliveryError
from app.services.user_hooks import UserHooks

logger = logging.getLogger(__name__)


class RegistrationError(ValueError):
    """Registration data rejected (duplicate email, weak or mismatched password)."""


class InvalidCredentialsError(ValueError):
    """Email/password pair does not match a user."""


class PasswordResetError(ValueError):
    """Reset token unknown or expired, or new password rejected."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_new_password(password: str, password_confirm: str, error_cls=RegistrationError) -> None:
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise error_cls(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long")
    if password != password_confirm:
        raise error_cls("Passwords do not match")


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def _run_hook(hook, *args) -> None:
    # The user row is already committed; a mail failure is logged, not raised
    try:
        hook(*args)
    except MailDeliveryError as e:
        logger.error(f"User hook email failed: {e}")


def register_user(
    db: Session,
    hooks: UserHooks,
    name: str,
    email: str,
    password: str,
    password_confirm: str,
    email_visibility: bool = True,
) -> User:
    """Create a user and fire the after-create hook."""
    validate_new_password(password, password_confirm)
    email = normalize_email(email)
    if get_user_by_email(db, email):
        raise RegistrationError("An account with this email already exists")

    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        email_visibility=email_visibility,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user id={user.id}")

    _run_hook(hooks.after_user_created, user)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("Failed to authenticate.")
    return user


def request_password_reset(db: Session, hooks: UserHooks, email: str) -> Optional[User]:
    """
    Issue a reset token and fire the after-update hook.

    Unknown emails are ignored silently so the endpoint cannot be used to probe accounts.
    """
    user = get_user_by_email(db, email)
    if not user:
        logger.info("Password reset requested for unknown email")
        return None

    previous_token = user.password_reset_token
    user.password_reset_token = generate_reset_token()
    user.password_reset_expires_at = datetime.now(timezone.utc) + timedelta(
        minutes=settings.PASSWORD_RESET_TTL_MINUTES
    )
    db.commit()
    db.refresh(user)

    _run_hook(hooks.after_user_updated, user, previous_token)
    return user


def confirm_password_reset(db: Session, token: str, password: str, password_confirm: str) -> User:
    """Set a new password for the holder of a valid reset token and clear the token."""
    validate_new_password(password, password_confirm, error_cls=PasswordResetError)
    if not token:
        raise PasswordResetError("Invalid or expired reset token")

    user = db.query(User).filter(User.password_reset_token == token).first()
    if not user:
        raise PasswordResetError("Invalid or expired reset token")

    expires_at = user.password_reset_expires_at
    if expires_at is not None and expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at is None or expires_at <= datetime.now(timezone.utc):
        raise PasswordResetError("Invalid or expired reset token")

    user.password_hash = hash_password(password)
    user.password_reset_token = None
    user.password_reset_expires_at = None
    db.commit()
    db.refresh(user)
    logger.info(f"Password reset completed for user id={user.id}")
    return user
