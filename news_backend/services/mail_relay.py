from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Protocol

import aiosmtplib
import structlog

from ..config import Settings, get_settings
from ..exceptions import MailDeliveryError

logger = structlog.get_logger(__name__)


@dataclass
class VolunteerMessage:
    name: str
    email: str
    message: str

    @property
    def subject(self) -> str:
        return f"New Volunteer Message from {self.name}"

    @property
    def body(self) -> str:
        return f"Name: {self.name}\nEmail: {self.email}\n\nMessage:\n{self.message}"


class MailRelay(Protocol):
    async def send(self, sender: str, recipient: str, subject: str, body: str) -> None:
        ...


class SmtpMailRelay:
    """Sends plain-text mail through an authenticated SMTP account (STARTTLS)."""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.email_user
        self.password = settings.email_pass
        self.timeout = settings.smtp_timeout_seconds

    async def send(self, sender: str, recipient: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(body)

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=True,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"Failed to send email: {e}") from e

        logger.info("email_sent", recipient=recipient, subject=subject)


async def relay_volunteer_message(relay: MailRelay, account: Optional[str], volunteer: VolunteerMessage) -> None:
    """Forward a contact-form submission to the organisation's own inbox."""
    if not account:
        raise MailDeliveryError("Mail account is not configured")
    await relay.send(
        sender=account,
        recipient=account,
        subject=volunteer.subject,
        body=volunteer.body,
    )
