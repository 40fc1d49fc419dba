"""Django Transit - Seat reservations and package shipments on scheduled trips."""

__version__ = "0.1.0"

__all__ = [
    # Models
    "Booking",
    "Package",
    "StatusChange",
    "Trip",
    # Enums
    "BookingStatus",
    "PackageStatus",
    "PaymentMethod",
    "PaymentStatus",
    # Services
    "create_booking",
    "cancel_booking",
    "mark_no_show",
    "book_package",
    "mark_arrived",
    "collect_package",
    "cancel_package",
    # Pricing
    "compute_package_price",
    # Exceptions
    "TransitError",
    "ValidationError",
    "CapacityError",
    "ConflictError",
    "IdentityMismatchError",
    "NotFoundError",
]

_MODELS = {"Booking", "Package", "StatusChange", "Trip", "PaymentMethod", "PaymentStatus"}
_SERVICES = {
    "create_booking",
    "cancel_booking",
    "mark_no_show",
    "book_package",
    "mark_arrived",
    "collect_package",
    "cancel_package",
}


def __getattr__(name: str):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in _MODELS:
        from . import models

        return getattr(models, name)
    if name in _SERVICES:
        from . import services

        return getattr(services, name)
    if name in ("BookingStatus", "PackageStatus"):
        from . import lifecycle

        return getattr(lifecycle, name)
    if name == "compute_package_price":
        from .pricing import compute_package_price

        return compute_package_price
    if name in ("TransitError", "ValidationError", "CapacityError", "ConflictError",
                "IdentityMismatchError", "NotFoundError"):
        from . import exceptions

        return getattr(exceptions, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
