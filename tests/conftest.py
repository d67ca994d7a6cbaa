"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING so the .env file for the current APP_ENV is not loaded,
and provides deterministic fakes for the slot store clock and email channel.
"""

import os

# CRITICAL: Set this before any imports that might load settings
# This prevents the .env file from being loaded in tests
os.environ["TESTING"] = "true"

# Set default env vars that all tests might need
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("EMAIL_FROM_ADDRESS", "noreply@example.com")
os.environ.setdefault("EMAIL_TO_ADDRESS", "team@example.com")
os.environ.setdefault("APP_ALLOWED_ORIGIN", "https://www.example.com")

import pytest

from contact_api.adapters.email.base import AbstractEmailSender, OutgoingEmail
from contact_api.adapters.slot_store.base import AbstractSlotStore
from contact_api.adapters.slot_store.in_memory import InMemorySlotStore
from contact_api.core.errors import SlotStoreError

# 2026-01-01T10:00:00Z, the start of an hour window.
HOUR_START = 1_767_261_600.0


class FakeTime:
    """Deterministic clock used to test window and expiration logic."""

    def __init__(self, start: float = HOUR_START) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class RecordingEmailSender(AbstractEmailSender):
    """Email sender that keeps every message instead of delivering it."""

    def __init__(self) -> None:
        self.sent: list[OutgoingEmail] = []

    async def send(self, email: OutgoingEmail) -> None:
        self.sent.append(email)


class FailingSlotStore(AbstractSlotStore):
    """Store whose every write fails like an unreachable backend."""

    def __init__(self) -> None:
        self.calls = 0

    async def create_if_absent(self, key: str, expires_at: int) -> bool:
        self.calls += 1
        raise SlotStoreError(
            code="slot_store_unavailable",
            message="Rate limit store request failed",
            details={"backend": "fake"},
        )


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def slot_store(fake_time: FakeTime) -> InMemorySlotStore:
    return InMemorySlotStore(clock=fake_time)


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def failing_store() -> FailingSlotStore:
    return FailingSlotStore()
