"""Notifiers used by the test suite."""

from django_transit.notifiers import BaseNotifier, NotifyResult


class RecordingNotifier(BaseNotifier):
    """Keeps every delivered (event, recipient) pair in memory.

    Set ``failures`` to make the next N calls fail.
    """

    notifier_name = "recording"
    sent = []
    failures = 0

    @classmethod
    def reset(cls):
        cls.sent = []
        cls.failures = 0

    def notify(self, event, recipients):
        if RecordingNotifier.failures > 0:
            RecordingNotifier.failures -= 1
            return NotifyResult.fail(notifier=self.notifier_name, error="gateway timeout")
        for recipient in recipients:
            RecordingNotifier.sent.append((event, recipient))
        return NotifyResult.ok(notifier=self.notifier_name, message_id=f"rec-{len(RecordingNotifier.sent)}")


class ExplodingNotifier(BaseNotifier):
    """Raises instead of returning a result."""

    notifier_name = "exploding"

    def notify(self, event, recipients):
        raise RuntimeError("SMS gateway unreachable")


class NotANotifier:
    pass
