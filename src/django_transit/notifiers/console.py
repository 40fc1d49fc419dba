"""Console notifier for development."""

import logging
import re
import uuid

from .base import BaseNotifier, LifecycleEvent, NotifyResult, Recipient

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ConsoleNotifier(BaseNotifier):
    """Notifier that logs messages instead of sending them.

    Does not actually send SMS or email - just logs them for debugging.
    """

    notifier_name = "console"

    def notify(self, event: LifecycleEvent, recipients: list[Recipient]) -> NotifyResult:
        """Log each message and return success."""
        invalid = [r.address for r in recipients if not self.validate_recipient(r)]
        if invalid:
            return NotifyResult.fail(
                notifier=self.notifier_name,
                error=f"Invalid recipient address: {', '.join(invalid)}",
            )

        fake_message_id = f"console-{uuid.uuid4().hex[:12]}"
        for recipient in recipients:
            logger.info(
                "\n"
                + "=" * 60 + "\n"
                + f"CONSOLE {recipient.channel.upper()} (not actually sent)\n"
                + "=" * 60 + "\n"
                + f"Event: {event.name} [{event.reference}]\n"
                + f"To: {recipient.name} <{recipient.address}>\n"
                + (f"Subject: {event.subject}\n" if recipient.channel == "email" else "")
                + "-" * 60 + "\n"
                + f"{event.body}\n"
                + "=" * 60
            )

        return NotifyResult.ok(notifier=self.notifier_name, message_id=fake_message_id)

    def validate_recipient(self, recipient: Recipient) -> bool:
        """Validate phone numbers for SMS (E.164 preferred) and emails for email."""
        address = recipient.address
        if not address:
            return False
        if recipient.channel == "email":
            return bool(EMAIL_RE.match(address))
        cleaned = re.sub(r"[\s\-\(\)]", "", address)
        if cleaned.startswith("+"):
            return len(cleaned) >= 10 and cleaned[1:].isdigit()
        return len(cleaned) >= 10 and cleaned.isdigit()
