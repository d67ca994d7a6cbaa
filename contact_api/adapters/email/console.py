"""Console email sender used for development and as the default backend."""

from __future__ import annotations

import logging

from contact_api.adapters.email.base import AbstractEmailSender, OutgoingEmail

logger = logging.getLogger(__name__)


class ConsoleEmailSender(AbstractEmailSender):
    """Logs message metadata instead of delivering it."""

    async def send(self, email: OutgoingEmail) -> None:
        # Message content stays out of the logs; redaction covers the addresses.
        logger.info(
            "email.console",
            extra={
                "from_address": email.from_address,
                "to_address": email.to_address,
                "reply_to": email.reply_to,
                "subject_chars": len(email.subject),
                "body_chars": len(email.body),
            },
        )
