"""Notifiers that deliver lifecycle events."""

from .base import BaseNotifier, LifecycleEvent, NotifyResult, Recipient
from .console import ConsoleNotifier

__all__ = [
    "BaseNotifier",
    "ConsoleNotifier",
    "LifecycleEvent",
    "NotifyResult",
    "Recipient",
]
