"""
Email hooks fired after a user record is written.

* after create: welcome email, unless the record already carries a reset token
* after update: reset-link email when the reset token newly appears or changes

Each hook does one check and at most one send. There is no idempotency key:
replaying the same update with a different previous token sends again.
"""
import logging
from typing import Optional

from fastapi import Depends

from app.core.config import settings
from app.models.user import User
from app.services.mail_service import MailMessage, MailService, get_mail_service

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome to Risk Analysis Platform"
RESET_SUBJECT = "Password Reset Request"


def build_reset_link(token: str) -> str:
    return settings.RESET_PASSWORD_URL.format(token=token)


def welcome_message(user: User) -> MailMessage:
    return MailMessage(
        to=user.email,
        subject=WELCOME_SUBJECT,
        html=(
            "<h1>Welcome!</h1>"
            "<p>Your account has been created successfully. "
            "You can now log in and start creating analyses.</p>"
        ),
    )


def reset_message(user: User, token: str) -> MailMessage:
    reset_link = build_reset_link(token)
    validity = settings.PASSWORD_RESET_TTL_MINUTES
    validity_text = "1 hour" if validity == 60 else f"{validity} minutes"
    return MailMessage(
        to=user.email,
        subject=RESET_SUBJECT,
        html=(
            "<h1>Password Reset</h1>"
            "<p>Click the link below to reset your password:</p>"
            f"<p><a href='{reset_link}'>Reset Password</a></p>"
            f"<p>This link expires in {validity_text}.</p>"
            "<p>If you didn't request this, please ignore this email.</p>"
        ),
    )


class UserHooks:
    """Record hooks for the users table."""

    def __init__(self, mailer: MailService):
        self.mailer = mailer

    def after_user_created(self, user: User) -> bool:
        """Send the welcome email. Returns True if an email was dispatched."""
        if user.password_reset_token:
            logger.debug(f"User id={user.id} created with a reset token, skipping welcome email")
            return False
        return self.mailer.send(welcome_message(user))

    def after_user_updated(self, user: User, previous_reset_token: Optional[str]) -> bool:
        """Send the reset email if the reset token was just set. Returns True if dispatched."""
        new_token = user.password_reset_token
        if not new_token or new_token == previous_reset_token:
            return False
        logger.info(f"Password reset token issued for user id={user.id}, sending reset email")
        return self.mailer.send(reset_message(user, new_token))


def get_user_hooks(mailer: MailService = Depends(get_mail_service)) -> UserHooks:
    """Dependency returning the user record hooks."""
    return UserHooks(mailer)
