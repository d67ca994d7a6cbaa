"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep backward compatibility while encouraging
    consistent shapes across the codebase.
    """

    code: str
    message: str
    hint: str
    fields: list[str]
    backend: str
    setting: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when client input fails validation."""


class ConfigurationAppError(AppError):
    """Raised when required service configuration is missing or invalid."""


class InfrastructureAppError(AppError):
    """Raised when a backing service (store, mail relay) fails."""


class SlotStoreError(InfrastructureAppError):
    """Raised when the slot store fails for any reason other than an existing key."""


class EmailDeliveryAppError(InfrastructureAppError):
    """Raised when the email channel rejects or cannot accept a message."""
