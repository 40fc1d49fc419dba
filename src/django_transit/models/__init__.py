"""Models for django-transit."""

from .bookings import Booking, PaymentMethod, PaymentStatus
from .history import StatusChange
from .notifications import Channel, Notification, NotificationStatus
from .sequence import DailySequence
from .shipments import Package
from .trips import Trip

__all__ = [
    "Booking",
    "Channel",
    "DailySequence",
    "Notification",
    "NotificationStatus",
    "Package",
    "PaymentMethod",
    "PaymentStatus",
    "StatusChange",
    "Trip",
]
