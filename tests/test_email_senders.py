"""Tests for email sender adapters and their factory."""

import logging
import smtplib
from unittest.mock import MagicMock, patch

import pytest

from contact_api.adapters.email.base import OutgoingEmail
from contact_api.adapters.email.console import ConsoleEmailSender
from contact_api.adapters.email.factory import create_email_sender
from contact_api.adapters.email.smtp_client import SMTPEmailSender, build_mime_message
from contact_api.core.config import EmailSettings
from contact_api.core.errors import ConfigurationAppError, EmailDeliveryAppError


@pytest.fixture
def outgoing() -> OutgoingEmail:
    return OutgoingEmail(
        from_address="noreply@example.com",
        to_address="team@example.com",
        reply_to="ada@example.org",
        subject="New message from Ada",
        body="Hello there",
    )


def test_mime_message_headers(outgoing: OutgoingEmail) -> None:
    message = build_mime_message(outgoing)

    assert message["From"] == "noreply@example.com"
    assert message["To"] == "team@example.com"
    assert message["Reply-To"] == "ada@example.org"
    assert message["Subject"] == "New message from Ada"
    assert message.get_content().strip() == "Hello there"


class TestSMTPEmailSender:
    @pytest.mark.asyncio
    async def test_sends_with_starttls_and_login(self, outgoing: OutgoingEmail) -> None:
        smtp_instance = MagicMock()
        with patch("contact_api.adapters.email.smtp_client.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value = smtp_instance
            sender = SMTPEmailSender(
                "smtp.example.com",
                587,
                username="relay",
                password="s3cret",
                timeout_seconds=5.0,
            )

            await sender.send(outgoing)

        smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=5.0)
        smtp_instance.starttls.assert_called_once()
        smtp_instance.login.assert_called_once_with("relay", "s3cret")
        sent_message = smtp_instance.send_message.call_args.args[0]
        assert sent_message["Reply-To"] == "ada@example.org"

    @pytest.mark.asyncio
    async def test_skips_tls_and_login_when_not_configured(self, outgoing: OutgoingEmail) -> None:
        smtp_instance = MagicMock()
        with patch("contact_api.adapters.email.smtp_client.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value = smtp_instance
            sender = SMTPEmailSender("localhost", 25, use_tls=False)

            await sender.send(outgoing)

        smtp_instance.starttls.assert_not_called()
        smtp_instance.login.assert_not_called()
        smtp_instance.send_message.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            smtplib.SMTPRecipientsRefused({"team@example.com": (550, b"no such user")}),
            ConnectionRefusedError("connection refused"),
        ],
    )
    async def test_failures_become_delivery_errors(self, outgoing: OutgoingEmail, error) -> None:
        with patch("contact_api.adapters.email.smtp_client.smtplib.SMTP") as smtp_cls:
            smtp_cls.side_effect = error
            sender = SMTPEmailSender("smtp.example.com")

            with pytest.raises(EmailDeliveryAppError) as exc_info:
                await sender.send(outgoing)

        assert exc_info.value.code == "email_delivery_failed"
        assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
async def test_console_sender_logs_without_content(outgoing: OutgoingEmail, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="contact_api.adapters.email.console"):
        await ConsoleEmailSender().send(outgoing)

    records = [r for r in caplog.records if r.getMessage() == "email.console"]
    assert len(records) == 1
    assert records[0].body_chars == len("Hello there")
    assert "Hello there" not in caplog.text


class TestCreateEmailSender:
    def test_console_backend(self) -> None:
        assert isinstance(create_email_sender(EmailSettings(backend="console")), ConsoleEmailSender)

    def test_smtp_backend(self) -> None:
        sender = create_email_sender(
            EmailSettings(backend="smtp", smtp_host="smtp.example.com", smtp_port=2525)
        )

        assert isinstance(sender, SMTPEmailSender)
        assert sender.host == "smtp.example.com"
        assert sender.port == 2525

    def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigurationAppError) as exc_info:
            create_email_sender(EmailSettings(backend="pigeon"))

        assert exc_info.value.code == "email_unknown_backend"
