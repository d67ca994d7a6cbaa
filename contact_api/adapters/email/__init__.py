"""Email delivery adapters - abstracts over the outgoing mail channel."""

from contact_api.adapters.email.base import AbstractEmailSender, OutgoingEmail
from contact_api.adapters.email.console import ConsoleEmailSender
from contact_api.adapters.email.factory import create_email_sender
from contact_api.adapters.email.smtp_client import SMTPEmailSender

__all__ = [
    "AbstractEmailSender",
    "ConsoleEmailSender",
    "OutgoingEmail",
    "SMTPEmailSender",
    "create_email_sender",
]
