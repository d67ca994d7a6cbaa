"""Pydantic schemas for contact form submissions."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContactSubmission(BaseModel):
    """Contact form payload.

    Every field is optional at the schema level: missing, null and non-string
    values are coerced to trimmed strings so the service can report missing
    fields itself instead of failing schema validation.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="", description="Sender's name.")
    email: str = Field(default="", description="Sender's email, used as Reply-To.")
    message: str = Field(default="", description="Message body.")
    company: str = Field(
        default="",
        description="Honeypot field. Hidden from humans; any value marks the submission as automated.",
    )

    @field_validator("name", "email", "message", "company", mode="before")
    @classmethod
    def _coerce_to_trimmed_str(cls, value: Any) -> str:
        if not value:
            return ""
        return str(value).strip()

    def missing_fields(self) -> list[str]:
        """Names of required fields that are empty after trimming."""
        return [
            field_name
            for field_name in ("name", "email", "message")
            if not getattr(self, field_name)
        ]

    def header_unsafe_fields(self) -> list[str]:
        """Fields copied verbatim into a mail header that contain line breaks."""
        return [
            field_name
            for field_name in ("email",)
            if any(char in getattr(self, field_name) for char in "\r\n")
        ]

    @property
    def is_honeypot_filled(self) -> bool:
        return bool(self.company)


class ContactAcceptedResponse(BaseModel):
    """Body returned for accepted (or silently filtered) submissions."""

    status: Literal["ok"] = Field(default="ok", description="Always 'ok'.")
