"""Notifier interface.

A notifier delivers lifecycle events to people. The lifecycle never waits
on it and never fails because of it: outbox rows are handed to the active
notifier after commit, and any error is recorded on the row.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Recipient:
    """One person on one channel."""

    name: str
    channel: str
    address: str


@dataclass(frozen=True)
class LifecycleEvent:
    """A rendered lifecycle event ready for delivery."""

    name: str
    reference: str
    subject: str
    body: str
    context: dict = field(default_factory=dict)


@dataclass
class NotifyResult:
    """Result of a notify call."""

    success: bool
    notifier: str
    message_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, notifier: str, message_id: str = "") -> "NotifyResult":
        return cls(success=True, notifier=notifier, message_id=message_id)

    @classmethod
    def fail(cls, notifier: str, error: str) -> "NotifyResult":
        return cls(success=False, notifier=notifier, error=error)


class BaseNotifier(ABC):
    """Abstract base class for notifiers.

    Configure the active notifier with the TRANSIT_NOTIFIER setting
    (dotted path to a subclass).
    """

    notifier_name: str = "base"

    @abstractmethod
    def notify(self, event: LifecycleEvent, recipients: list[Recipient]) -> NotifyResult:
        """Deliver event to recipients.

        Args:
            event: The rendered event
            recipients: Who to deliver it to

        Returns:
            NotifyResult with success/failure and a provider message id
        """
        raise NotImplementedError

    def validate_recipient(self, recipient: Recipient) -> bool:
        """Validate that the recipient address is usable.

        Override in subclasses for channel-specific validation.
        """
        return bool(recipient.address)
