"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file and os.getenv("TESTING") != "true":
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment."""

    return LogSettings()


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    Pydantic Settings (v2) can populate values from environment variables.
    However, static type checkers often treat required fields as required
    constructor arguments, which is not how BaseSettings is intended to be used.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_store_settings() -> "StoreSettings":
    """Build slot store settings from environment."""

    return StoreSettings()


def _build_email_settings() -> "EmailSettings":
    """Build email delivery settings from environment."""

    return EmailSettings()


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field(
        "json",
        description="Log format: 'json' (structured) or 'plain'",
    )
    output: str = Field(
        "stdout",
        description="Log destination: 'stdout' or 'file'",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output is 'file'",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(
        5,
        description="Number of rotated log files to keep",
    )
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read/propagate the request correlation ID",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    allowed_origin: str = Field(
        "*",
        description="Value of Access-Control-Allow-Origin for the contact form's site",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting of contact submissions",
    )
    rate_limit_per_hour: int = Field(
        5,
        description="Maximum number of submissions allowed per client per window",
        ge=0,
    )
    rate_limit_window_seconds: int = Field(
        3600,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_ttl_slack_seconds: int = Field(
        100,
        description="Extra lifetime given to slot keys past the window end (clock skew buffer)",
        ge=0,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    trust_forwarded_for: bool = Field(
        False,
        description="Use the first X-Forwarded-For hop as client identity (behind a trusted proxy)",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class StoreSettings(BaseSettings):
    """Shared slot store configuration."""

    backend: str = Field(
        "memory",
        description="Slot store backend: 'memory' (single process) or 'redis' (shared)",
    )
    redis_url: str | None = Field(
        None,
        description="Redis connection URL (required for the redis backend)",
    )
    namespace: str = Field(
        "contact-rate",
        description="Key prefix isolating this service's slot keys",
    )
    socket_timeout_seconds: float = Field(
        2.0,
        description="Timeout for a single store call in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        case_sensitive=False,
    )


class EmailSettings(BaseSettings):
    """Email delivery configuration."""

    backend: str = Field(
        "console",
        description="Email backend: 'console' (log only) or 'smtp'",
    )
    from_address: str | None = Field(
        None,
        description="Verified sender address used in the From header",
    )
    to_address: str | None = Field(
        None,
        description="Mailbox that receives contact messages",
    )
    subject_prefix: str = Field(
        "New contact message",
        description="Subject line prefix; the sender's name is appended",
    )
    smtp_host: str = Field("localhost", description="SMTP server host")
    smtp_port: int = Field(587, description="SMTP server port")
    smtp_username: str | None = Field(None, description="SMTP login user")
    smtp_password: str | None = Field(None, description="SMTP login password")
    smtp_use_tls: bool = Field(True, description="Upgrade the connection with STARTTLS")
    timeout_seconds: float = Field(
        10.0,
        description="SMTP connection timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.

    Environments:
    - development: Local development (DEBUG=true)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    log: LogSettings = Field(default_factory=_build_log_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    store: StoreSettings = Field(default_factory=_build_store_settings)
    email: EmailSettings = Field(default_factory=_build_email_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
