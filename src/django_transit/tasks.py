"""Celery tasks for django-transit.

The host project owns the Celery app (``app.autodiscover_tasks()`` picks
these up). Suggested beat schedule::

    CELERY_BEAT_SCHEDULE = {
        "transit-dispatch-notifications": {
            "task": "django_transit.tasks.dispatch_notifications",
            "schedule": 60.0,
        },
    }
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def deliver_notification(notification_id: int):
    """Deliver one queued notification."""
    from .services.notifications import deliver_by_id

    deliver_by_id(notification_id)


@shared_task(ignore_result=True)
def dispatch_notifications():
    """Periodic sweep of pending notifications whose retry is due."""
    from .services.notifications import dispatch_due_notifications

    counts = dispatch_due_notifications()
    logger.info(f"Notification sweep: {counts}")
    return counts
