"""Lifecycle services for bookings, packages and their notifications."""

from .bookings import cancel_booking, create_booking, mark_no_show
from .notifications import dispatch_due_notifications
from .shipments import book_package, cancel_package, collect_package, mark_arrived

__all__ = [
    "book_package",
    "cancel_booking",
    "cancel_package",
    "collect_package",
    "create_booking",
    "dispatch_due_notifications",
    "mark_arrived",
    "mark_no_show",
]
