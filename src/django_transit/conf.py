"""Configuration helpers for django-transit."""

from functools import lru_cache
from importlib import import_module

from django.conf import settings

from .exceptions import NotifierLoadError

DEFAULTS = {
    "NOTIFIER": "django_transit.notifiers.console.ConsoleNotifier",
    "NOTIFICATION_DISPATCH": "celery",
    "NOTIFICATION_MAX_ATTEMPTS": 5,
    "NOTIFICATION_RETRY_BASE_SECONDS": 60,
    "NOTIFICATION_LEASE_SECONDS": 300,
    "NO_SHOW_GRACE_MINUTES": 30,
}


def get_setting(name: str, default=None):
    """Get a setting with TRANSIT_ prefix, falling back to DEFAULTS."""
    if default is None:
        default = DEFAULTS.get(name)
    return getattr(settings, f"TRANSIT_{name}", default)


@lru_cache(maxsize=16)
def load_notifier(dotted_path: str):
    """
    Import and instantiate a notifier from dotted path.

    Raises NotifierLoadError for bad imports or non-subclass notifiers.
    """
    from .notifiers.base import BaseNotifier

    try:
        module_path, class_name = dotted_path.rsplit(".", 1)
    except ValueError:
        raise NotifierLoadError(dotted_path, "Invalid dotted path format")

    try:
        module = import_module(module_path)
    except ImportError as e:
        raise NotifierLoadError(dotted_path, f"Cannot import module: {e}")

    try:
        notifier_class = getattr(module, class_name)
    except AttributeError:
        raise NotifierLoadError(dotted_path, f"Class '{class_name}' not found in module")

    if not isinstance(notifier_class, type) or not issubclass(notifier_class, BaseNotifier):
        raise NotifierLoadError(
            dotted_path,
            f"'{class_name}' must be a subclass of BaseNotifier"
        )

    return notifier_class()


def get_notifier():
    """Return the notifier configured by TRANSIT_NOTIFIER."""
    return load_notifier(get_setting("NOTIFIER"))


def clear_notifier_cache():
    """Clear the notifier loading cache. Useful for testing."""
    load_notifier.cache_clear()
