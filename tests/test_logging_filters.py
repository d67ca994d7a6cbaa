"""Tests for sensitive data filtering and JSON formatting in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from contact_api.core.logging import (
    JsonFormatter,
    SensitiveDataFilter,
    clear_request_id,
    hash_for_log,
    set_request_id,
)


@pytest.fixture
def log_stream() -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_sensitive_filter_redacts_contact_pii(log_stream):
    """Ensure visitor addresses and client IPs never reach the output."""
    logger, stream = log_stream

    logger.info(
        "contact_event",
        extra={
            "email": "ada@example.org",
            "reply_to": "ada@example.org",
            "client_ip": "203.0.113.10",
            "message_chars": 42,
        },
    )

    output = stream.getvalue()

    assert "ada@example.org" not in output
    assert "203.0.113.10" not in output
    assert "[REDACTED]" in output
    assert "message_chars" in output


def test_sensitive_filter_redacts_credentials(log_stream):
    """Ensure SMTP passwords and Redis URLs (which embed passwords) are redacted."""
    logger, stream = log_stream

    logger.info(
        "config_event",
        extra={
            "smtp_password": "s3cret",
            "redis_url": "redis://:hunter2@cache:6379/0",
        },
    )

    output = stream.getvalue()

    assert "s3cret" not in output
    assert "hunter2" not in output


def test_sensitive_filter_allows_safe_fields(log_stream):
    """Verify safe fields pass through unmodified."""
    logger, stream = log_stream

    logger.info(
        "rate_limit.allowed",
        extra={
            "request_id": "req-123",
            "identity_hash": "abcdef0123456789",
            "slot": 2,
            "window_s": 3600,
        },
    )

    data = json.loads(stream.getvalue())

    assert data["message"] == "rate_limit.allowed"
    assert data["request_id"] == "req-123"
    assert data["identity_hash"] == "abcdef0123456789"
    assert data["slot"] == 2
    assert "[REDACTED]" not in stream.getvalue()


def test_sensitive_filter_redacts_nested_dicts(log_stream):
    """Ensure nested sensitive fields are redacted."""
    logger, stream = log_stream

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "x-forwarded-for": "203.0.113.10",
                "user-agent": "pytest",
            },
        },
    )

    output = stream.getvalue()

    assert "203.0.113.10" not in output
    assert "pytest" in output


def test_json_formatter_includes_exception(log_stream):
    logger, stream = log_stream

    try:
        raise RuntimeError("store down")
    except RuntimeError:
        logger.exception("unhandled_exception")

    data = json.loads(stream.getvalue())

    assert "RuntimeError: store down" in data["exc_info"]


def test_hash_for_log_is_stable_and_short():
    assert hash_for_log("203.0.113.10") == hash_for_log("203.0.113.10")
    assert hash_for_log("203.0.113.10") != hash_for_log("203.0.113.11")
    assert len(hash_for_log("203.0.113.10")) == 16


def test_json_formatter_stamps_request_id_from_context(log_stream):
    logger, stream = log_stream

    set_request_id("req-ctx-7")
    try:
        logger.info("contact.accepted")
    finally:
        clear_request_id()
    logger.info("app.startup")

    first, second = (json.loads(line) for line in stream.getvalue().splitlines())

    assert first["request_id"] == "req-ctx-7"
    assert "request_id" not in second
