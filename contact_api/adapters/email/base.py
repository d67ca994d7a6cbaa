from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OutgoingEmail:
	"""A fully addressed plain-text message ready for delivery."""

	from_address: str
	to_address: str
	reply_to: str
	subject: str
	body: str


class AbstractEmailSender(ABC):
	"""Interface for channels that deliver contact messages."""

	@abstractmethod
	async def send(self, email: OutgoingEmail) -> None:
		"""Deliver a single message.

		Args:
			email: Message to deliver.

		Raises:
			EmailDeliveryAppError: If the channel rejects or cannot accept the message.
		"""
		...

	async def close(self) -> None:
		"""Release resources held by the sender (no-op by default)."""
		return None
