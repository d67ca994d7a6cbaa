"""Contact submission service.

Orchestrates a single submission:
- Configuration check (sender and recipient must be set)
- Honeypot filtering, before rate limiting so bots neither learn they were
  filtered nor consume a legitimate client's quota
- Required-field validation and header-safety checks
- Per-client rate limiting
- Email dispatch

Infrastructure errors (store, mail channel) propagate unchanged so the HTTP
layer reports them as opaque server failures.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from contact_api.adapters.email.base import AbstractEmailSender, OutgoingEmail
from contact_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from contact_api.core.errors import ConfigurationAppError, ValidationAppError
from contact_api.schemas.contact import ContactSubmission

logger = logging.getLogger(__name__)


class SubmissionOutcome(str, enum.Enum):
    ACCEPTED = "accepted"
    FILTERED = "filtered"
    RATE_LIMITED = "rate_limited"


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a submission plus the rate limit decision, when one was made."""

    outcome: SubmissionOutcome
    rate_limit: RateLimitResult | None = None


def build_contact_email(
    submission: ContactSubmission,
    *,
    from_address: str,
    to_address: str,
    subject_prefix: str,
) -> OutgoingEmail:
    """Build the notification email for a validated submission.

    The visitor's address goes to Reply-To only; the From header must stay
    the verified sender address. Whitespace runs in the name, line
    breaks included, collapse to single spaces in the subject.
    """
    single_line_name = " ".join(submission.name.split())
    return OutgoingEmail(
        from_address=from_address,
        to_address=to_address,
        reply_to=submission.email,
        subject=f"{subject_prefix} from {single_line_name}",
        body=submission.message,
    )


class ContactService:
    """Service for handling contact form submissions."""

    def __init__(
        self,
        rate_limiter: AbstractRateLimiter,
        email_sender: AbstractEmailSender,
        *,
        from_address: str | None,
        to_address: str | None,
        subject_prefix: str = "New contact message",
        rate_limit_enabled: bool = True,
    ) -> None:
        """Initialize service with its collaborators.

        Args:
            rate_limiter: Limiter consulted once per legitimate submission.
            email_sender: Channel used to deliver accepted submissions.
            from_address: Verified sender address.
            to_address: Mailbox receiving contact messages.
            subject_prefix: Subject prefix; the sender's name is appended.
            rate_limit_enabled: Skip the limiter entirely when False.
        """
        self.rate_limiter = rate_limiter
        self.email_sender = email_sender
        self.from_address = from_address
        self.to_address = to_address
        self.subject_prefix = subject_prefix
        self.rate_limit_enabled = rate_limit_enabled

    def _require_configuration(self) -> tuple[str, str]:
        if not self.from_address:
            raise ConfigurationAppError(
                code="email_sender_not_configured",
                message="Sender address is not configured",
                details={"setting": "EMAIL_FROM_ADDRESS"},
            )
        if not self.to_address:
            raise ConfigurationAppError(
                code="email_recipient_not_configured",
                message="Recipient address is not configured",
                details={"setting": "EMAIL_TO_ADDRESS"},
            )
        return self.from_address, self.to_address

    async def submit(self, submission: ContactSubmission, identity: str) -> SubmissionResult:
        """Process one contact submission.

        Args:
            submission: Parsed and trimmed payload.
            identity: Client identity used as the rate limit key.

        Returns:
            SubmissionResult with the outcome (accepted, filtered, rate_limited).

        Raises:
            ConfigurationAppError: If sender or recipient is not configured.
            ValidationAppError: If name, email or message is empty, or the email
                address contains a line break.
            SlotStoreError: If the rate limit store fails.
            EmailDeliveryAppError: If the email channel fails.
        """
        from_address, to_address = self._require_configuration()

        if submission.is_honeypot_filled:
            logger.info("contact.filtered", extra={"reason": "honeypot"})
            return SubmissionResult(outcome=SubmissionOutcome.FILTERED)

        missing = submission.missing_fields()
        if missing:
            raise ValidationAppError(
                code="missing_fields",
                message="Missing fields",
                details={"fields": missing},
            )

        unsafe = submission.header_unsafe_fields()
        if unsafe:
            raise ValidationAppError(
                code="invalid_fields",
                message="Fields must not contain line breaks",
                details={"fields": unsafe},
            )

        rate_limit: RateLimitResult | None = None
        if self.rate_limit_enabled:
            rate_limit = await self.rate_limiter.acquire(identity)
            if not rate_limit.allowed:
                return SubmissionResult(
                    outcome=SubmissionOutcome.RATE_LIMITED,
                    rate_limit=rate_limit,
                )

        email = build_contact_email(
            submission,
            from_address=from_address,
            to_address=to_address,
            subject_prefix=self.subject_prefix,
        )
        await self.email_sender.send(email)

        logger.info(
            "contact.accepted",
            extra={"message_chars": len(submission.message)},
        )
        return SubmissionResult(outcome=SubmissionOutcome.ACCEPTED, rate_limit=rate_limit)
