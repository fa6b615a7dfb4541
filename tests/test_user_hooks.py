"""
Tests for the email hooks fired after user writes, and for the SMTP mail service.
"""
import smtplib
import pytest
from unittest.mock import MagicMock, patch

from app.core.config import Settings
from app.models.user import User
from app.services.mail_service import MailDeliveryError, MailMessage, MailService
from app.services.user_hooks import (
    RESET_SUBJECT,
    WELCOME_SUBJECT,
    UserHooks,
    build_reset_link,
    reset_message,
)


class FakeMailer:
    def __init__(self):
        self.sent = []

    def send(self, message):
        self.sent.append(message)
        return True


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def hooks(mailer):
    return UserHooks(mailer)


def make_user(**kwargs):
    defaults = {"id": 1, "name": "Rina", "email": "rina@example.com", "password_hash": "x"}
    defaults.update(kwargs)
    return User(**defaults)


def test_welcome_email_sent_on_create(hooks, mailer):
    assert hooks.after_user_created(make_user()) is True
    assert len(mailer.sent) == 1
    assert mailer.sent[0].subject == WELCOME_SUBJECT
    assert mailer.sent[0].to == "rina@example.com"


def test_welcome_email_skipped_when_created_with_reset_token(hooks, mailer):
    assert hooks.after_user_created(make_user(password_reset_token="abc")) is False
    assert mailer.sent == []


def test_reset_email_sent_once_when_token_appears(hooks, mailer):
    """Token goes from unset to set: exactly one email carrying the link."""
    user = make_user(password_reset_token="tok-123")
    assert hooks.after_user_updated(user, previous_reset_token=None) is True

    assert len(mailer.sent) == 1
    message = mailer.sent[0]
    assert message.subject == RESET_SUBJECT
    assert build_reset_link("tok-123") in message.html
    assert "expires in 1 hour" in message.html


def test_reset_email_sent_when_token_changes(hooks, mailer):
    user = make_user(password_reset_token="tok-new")
    assert hooks.after_user_updated(user, previous_reset_token="tok-old") is True
    assert len(mailer.sent) == 1


def test_no_email_when_token_unchanged_or_cleared(hooks, mailer):
    assert hooks.after_user_updated(make_user(password_reset_token="same"), previous_reset_token="same") is False
    assert hooks.after_user_updated(make_user(password_reset_token=None), previous_reset_token="old") is False
    assert mailer.sent == []


def test_reset_link_uses_configured_template():
    with patch("app.services.user_hooks.settings.RESET_PASSWORD_URL", "https://osh.example/reset/{token}"):
        assert build_reset_link("abc") == "https://osh.example/reset/abc"
        assert "https://osh.example/reset/abc" in reset_message(make_user(), "abc").html


class TestMailService:
    """SMTP delivery."""

    def test_unconfigured_mail_is_dropped(self):
        service = MailService(Settings(SMTP_HOST=None))
        assert service.send(MailMessage(to="a@example.com", subject="Hi", html="<p>x</p>")) is False

    def test_configured_mail_goes_through_smtp(self):
        config = Settings(SMTP_HOST="smtp.example.com", SMTP_USERNAME="user", SMTP_PASSWORD="pw")
        service = MailService(config)
        with patch("app.services.mail_service.smtplib.SMTP") as mock_smtp:
            server = MagicMock()
            mock_smtp.return_value.__enter__.return_value = server

            assert service.send(MailMessage(to="a@example.com", subject="Hi", html="<p>x</p>")) is True

        mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=10)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("user", "pw")
        sent = server.send_message.call_args[0][0]
        assert sent["To"] == "a@example.com"
        assert sent["Subject"] == "Hi"

    def test_relay_failure_raises_delivery_error(self):
        service = MailService(Settings(SMTP_HOST="smtp.example.com"))
        with patch("app.services.mail_service.smtplib.SMTP", side_effect=smtplib.SMTPConnectError(421, "busy")):
            with pytest.raises(MailDeliveryError):
                service.send(MailMessage(to="a@example.com", subject="Hi", html="<p>x</p>"))
