"""Factory pattern for creating email sender instances."""

from contact_api.adapters.email.base import AbstractEmailSender
from contact_api.adapters.email.console import ConsoleEmailSender
from contact_api.adapters.email.smtp_client import SMTPEmailSender
from contact_api.core.config import EmailSettings, settings
from contact_api.core.errors import ConfigurationAppError


def create_email_sender(email_settings: EmailSettings | None = None) -> AbstractEmailSender:
    """Factory function to instantiate the email sender based on backend.

    Args:
        email_settings: Optional email settings; defaults to global settings.

    Returns:
        AbstractEmailSender: Configured sender instance.

    Raises:
        ConfigurationAppError: If the backend is unknown.
    """
    cfg = email_settings or settings.email
    backend = cfg.backend.lower()

    if backend == "console":
        return ConsoleEmailSender()

    if backend == "smtp":
        return SMTPEmailSender(
            host=cfg.smtp_host,
            port=cfg.smtp_port,
            username=cfg.smtp_username,
            password=cfg.smtp_password,
            use_tls=cfg.smtp_use_tls,
            timeout_seconds=cfg.timeout_seconds,
        )

    raise ConfigurationAppError(
        code="email_unknown_backend",
        message=f"Unknown email backend: '{backend}'. Supported backends: console, smtp",
        details={"backend": backend, "setting": "EMAIL_BACKEND"},
    )
