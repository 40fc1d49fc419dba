"""Notification outbox services.

Lifecycle services call enqueue() inside their transaction. One outbox row
is written per recipient and channel; delivery is scheduled after commit and
runs on a Celery worker (or inline when TRANSIT_NOTIFICATION_DISPATCH is
"sync"). Nothing here raises into a lifecycle call: failures are logged and
recorded on the row, and due rows are retried by dispatch_due_notifications().

Retry policy: a failed delivery is retried after
TRANSIT_NOTIFICATION_RETRY_BASE_SECONDS * 2 ** (attempts - 1) seconds, until
TRANSIT_NOTIFICATION_MAX_ATTEMPTS attempts have been made.

A delivery attempt leases its row for TRANSIT_NOTIFICATION_LEASE_SECONDS by
moving next_attempt_at forward. While the lease runs no other worker or
sweep can claim the row; if the worker dies mid-send, the sweep picks the
row up once the lease expires.
"""

import logging
from datetime import timedelta
from typing import Any, Iterable

from django.contrib.contenttypes.models import ContentType
from django.db import transaction
from django.template import Context, Engine
from django.utils import timezone

from ..conf import get_notifier, get_setting
from ..exceptions import NotifierError
from ..models import Channel, Notification, NotificationStatus
from ..notifiers import LifecycleEvent, Recipient

logger = logging.getLogger(__name__)

# Standalone engine: host TEMPLATES settings do not apply to message text
_engine = Engine()


class Events:
    """Lifecycle events that produce notifications."""

    BOOKING_CREATED = "BookingCreated"
    BOOKING_CANCELLED = "BookingCancelled"
    PACKAGE_BOOKED = "PackageBooked"
    PACKAGE_ARRIVED = "PackageArrived"
    PACKAGE_COLLECTED = "PackageCollected"
    PACKAGE_CANCELLED = "PackageCancelled"


# event -> (subject, body); rendered with Django's template engine
EVENT_TEMPLATES = {
    Events.BOOKING_CREATED: (
        "Booking confirmed {{ reference }}",
        "Hello {{ name }}, your seat {{ seat_number }} on {{ route }} departing "
        "{{ departure }} is confirmed. Ticket: {{ reference }}. Price: {{ price }} RWF.",
    ),
    Events.BOOKING_CANCELLED: (
        "Booking cancelled {{ reference }}",
        "Hello {{ name }}, your booking {{ reference }} on {{ route }} has been "
        "cancelled. Reason: {{ reason }}.",
    ),
    Events.PACKAGE_BOOKED: (
        "Package booked {{ reference }}",
        "Hello {{ name }}, a package from {{ sender }} to {{ receiver }} is on its way "
        "({{ route }}). Tracking number: {{ reference }}. Expected: {{ expected }}.",
    ),
    Events.PACKAGE_ARRIVED: (
        "Package arrived {{ reference }}",
        "Hello {{ name }}, package {{ reference }} has arrived at {{ destination }}. "
        "Bring your ID to collect it.",
    ),
    Events.PACKAGE_COLLECTED: (
        "Package collected {{ reference }}",
        "Hello {{ name }}, package {{ reference }} was collected by "
        "{{ collected_by }} on {{ collected_at }}.",
    ),
    Events.PACKAGE_CANCELLED: (
        "Package cancelled {{ reference }}",
        "Hello {{ name }}, package {{ reference }} has been cancelled. Reason: {{ reason }}.",
    ),
}


def recipients_for(name: str, phone: str = "", email: str = "") -> list[Recipient]:
    """Build the recipients for one person: SMS to phone, email when known."""
    recipients = []
    if phone:
        recipients.append(Recipient(name=name, channel=Channel.SMS, address=phone))
    if email:
        recipients.append(Recipient(name=name, channel=Channel.EMAIL, address=email))
    return recipients


def render_event(event: str, reference: str, context: dict[str, Any]) -> LifecycleEvent:
    """Render the subject and body for event."""
    subject_tpl, body_tpl = EVENT_TEMPLATES[event]
    ctx = Context({"reference": reference, **context}, autoescape=False)
    return LifecycleEvent(
        name=event,
        reference=reference,
        subject=_engine.from_string(subject_tpl).render(ctx),
        body=_engine.from_string(body_tpl).render(ctx),
        context=context,
    )


def enqueue(
    event: str,
    target,
    reference: str,
    recipients: Iterable[Recipient],
    context: dict[str, Any] = None,
) -> list[Notification]:
    """Queue event for delivery to recipients once the current transaction commits.

    Never raises: a failure to queue is logged and the lifecycle change
    proceeds.

    Args:
        event: One of Events
        target: Booking or Package the event is about
        reference: Ticket or tracking number
        recipients: Who to notify
        context: Template variables; "name" is filled per recipient

    Returns:
        The created Notification rows (empty if queueing failed)
    """
    context = context or {}
    try:
        with transaction.atomic():
            target_type = ContentType.objects.get_for_model(target)
            notifications = []
            for recipient in recipients:
                rendered = render_event(event, reference, {**context, "name": recipient.name})
                notifications.append(
                    Notification.objects.create(
                        event=event,
                        reference=reference,
                        channel=recipient.channel,
                        recipient_name=recipient.name,
                        address=recipient.address,
                        subject=rendered.subject,
                        body=rendered.body,
                        target_type=target_type,
                        target_id=str(target.pk),
                    )
                )
    except Exception:
        logger.exception(f"Failed to queue {event} notifications for {reference}")
        return []

    ids = [n.pk for n in notifications]
    if ids:
        transaction.on_commit(lambda: schedule_delivery(ids), robust=True)
    return notifications


def schedule_delivery(notification_ids: list[int]) -> None:
    """Hand notifications to the configured dispatcher.

    Called after commit. A broker outage leaves the rows PENDING for the
    periodic sweep.
    """
    mode = get_setting("NOTIFICATION_DISPATCH")

    if mode == "sync":
        for notification_id in notification_ids:
            deliver_by_id(notification_id)
        return

    from ..tasks import deliver_notification

    for notification_id in notification_ids:
        try:
            deliver_notification.apply_async(args=[notification_id], retry=False)
        except Exception:
            logger.exception(
                f"Could not schedule notification {notification_id}; left for retry sweep"
            )


def deliver_by_id(notification_id: int, now=None) -> Notification | None:
    """Deliver one outbox row by primary key."""
    try:
        notification = Notification.objects.get(pk=notification_id)
    except Notification.DoesNotExist:
        logger.warning(f"Notification {notification_id} no longer exists")
        return None
    return deliver(notification, now=now)


def deliver(notification: Notification, now=None) -> Notification:
    """Attempt delivery of one pending, due notification.

    The attempt is claimed with a conditional UPDATE on (status, attempts,
    next_attempt_at) that also leases the row, so a second worker cannot
    claim it while the first is still sending. Errors are recorded on the
    row and never raised.
    """
    if notification.status != NotificationStatus.PENDING:
        return notification

    now = now or timezone.now()
    lease = timedelta(seconds=get_setting("NOTIFICATION_LEASE_SECONDS"))
    attempt = notification.attempts + 1
    claimed = Notification.objects.filter(
        pk=notification.pk,
        status=NotificationStatus.PENDING,
        attempts=notification.attempts,
        next_attempt_at__lte=now,
    ).update(attempts=attempt, next_attempt_at=now + lease)
    if not claimed:
        notification.refresh_from_db()
        return notification
    notification.attempts = attempt
    notification.next_attempt_at = now + lease

    event = LifecycleEvent(
        name=notification.event,
        reference=notification.reference,
        subject=notification.subject,
        body=notification.body,
    )
    recipient = Recipient(
        name=notification.recipient_name,
        channel=notification.channel,
        address=notification.address,
    )

    try:
        notifier = get_notifier()
        result = notifier.notify(event, [recipient])
        if not result.success:
            raise NotifierError(result.error or "Unknown error", notifier=result.notifier)
    except Exception as e:
        logger.warning(f"Notification {notification.pk} attempt {attempt} failed: {e}")
        return _record_failure(notification, str(e), now)

    notification.status = NotificationStatus.SENT
    notification.sent_at = timezone.now()
    notification.provider_message_id = result.message_id or ""
    notification.last_error = ""
    notification.save(update_fields=["status", "sent_at", "provider_message_id", "last_error"])
    logger.info(
        f"Notification {notification.pk} ({notification.event}) sent via {result.notifier}"
    )
    return notification


def _record_failure(notification: Notification, error: str, now) -> Notification:
    max_attempts = get_setting("NOTIFICATION_MAX_ATTEMPTS")
    notification.last_error = error[:2000]

    if notification.attempts >= max_attempts:
        notification.status = NotificationStatus.FAILED
        logger.error(
            f"Notification {notification.pk} ({notification.event}) gave up after "
            f"{notification.attempts} attempts"
        )
    else:
        base = get_setting("NOTIFICATION_RETRY_BASE_SECONDS")
        delay = base * 2 ** (notification.attempts - 1)
        notification.next_attempt_at = now + timedelta(seconds=delay)

    notification.save(update_fields=["status", "last_error", "next_attempt_at"])
    return notification


def dispatch_due_notifications(now=None, limit: int = 100) -> dict[str, int]:
    """Retry pending notifications whose next attempt is due.

    Returns:
        Counts of outcomes: {"sent": n, "retrying": n, "failed": n}
    """
    now = now or timezone.now()
    due_ids = list(
        Notification.objects.filter(
            status=NotificationStatus.PENDING,
            next_attempt_at__lte=now,
        )
        .order_by("next_attempt_at", "id")
        .values_list("pk", flat=True)[:limit]
    )

    counts = {"sent": 0, "retrying": 0, "failed": 0}
    for notification_id in due_ids:
        notification = deliver_by_id(notification_id, now=now)
        if notification is None:
            continue
        if notification.status == NotificationStatus.SENT:
            counts["sent"] += 1
        elif notification.status == NotificationStatus.FAILED:
            counts["failed"] += 1
        else:
            counts["retrying"] += 1

    if due_ids:
        logger.info(f"Dispatched {len(due_ids)} due notifications: {counts}")
    return counts
