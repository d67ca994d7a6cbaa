"""SMTP email sender adapter."""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from contact_api.adapters.email.base import AbstractEmailSender, OutgoingEmail
from contact_api.core.errors import EmailDeliveryAppError

logger = logging.getLogger(__name__)


def build_mime_message(email: OutgoingEmail) -> EmailMessage:
    """Convert an OutgoingEmail into a MIME message with a Reply-To header."""
    message = EmailMessage()
    message["From"] = email.from_address
    message["To"] = email.to_address
    message["Reply-To"] = email.reply_to
    message["Subject"] = email.subject
    message.set_content(email.body)
    return message


class SMTPEmailSender(AbstractEmailSender):
    """Client delivering messages through an SMTP relay.

    ``smtplib`` is blocking, so each delivery runs in a worker thread.
    A new connection is opened per message.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize SMTP delivery settings.

        Args:
            host: SMTP server host.
            port: SMTP server port.
            username: Optional login user.
            password: Optional login password.
            use_tls: Upgrade the connection with STARTTLS before login.
            timeout_seconds: Connection/command timeout in seconds.
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout_seconds = timeout_seconds

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)

    async def send(self, email: OutgoingEmail) -> None:
        """Deliver the message via SMTP.

        Args:
            email: Message to deliver.

        Raises:
            EmailDeliveryAppError: If the relay is unreachable or refuses the message.
        """
        message = build_mime_message(email)

        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "email.send_failed",
                extra={
                    "backend": "smtp",
                    "smtp_host": self.host,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            raise EmailDeliveryAppError(
                code="email_delivery_failed",
                message="Email channel could not deliver the message",
                details={"backend": "smtp"},
            ) from exc

        logger.info("email.sent", extra={"backend": "smtp", "smtp_host": self.host})
