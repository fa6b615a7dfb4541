"""
Outgoing email over SMTP.
"""
import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from app.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    """Raised when the SMTP relay rejects or cannot receive a message."""


@dataclass
class MailMessage:
    to: str
    subject: str
    html: str


class MailService:
    """
    Sends HTML email through the configured SMTP relay.

    When SMTP_HOST is not configured the message is logged and dropped, which
    keeps local development and tests free of a mail server.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def is_configured(self) -> bool:
        return self.config.is_smtp_configured()

    def build(self, message: MailMessage) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((self.config.MAIL_SENDER_NAME, self.config.MAIL_SENDER_ADDRESS))
        msg["To"] = message.to
        msg["Subject"] = message.subject
        msg.attach(MIMEText(message.html, "html"))
        return msg

    def send(self, message: MailMessage) -> bool:
        """
        Send one message. No retry.

        Returns:
            True if handed to the relay, False if mail is not configured

        Raises:
            MailDeliveryError: If the relay fails
        """
        if not self.is_configured():
            logger.info(f"SMTP not configured, dropping email '{message.subject}' to {message.to}")
            return False

        msg = self.build(message)
        try:
            with smtplib.SMTP(self.config.SMTP_HOST, self.config.SMTP_PORT, timeout=10) as server:
                if self.config.SMTP_USE_TLS:
                    server.starttls()
                if self.config.SMTP_USERNAME:
                    server.login(self.config.SMTP_USERNAME, self.config.SMTP_PASSWORD or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"Failed to send '{message.subject}' to {message.to}: {e}") from e

        logger.info(f"Email '{message.subject}' sent to {message.to}")
        return True


def get_mail_service() -> MailService:
    """Dependency returning the mail service."""
    return MailService()
