"""Exceptions for django-transit.

Every lifecycle error is scoped to a single operation and carries a
``message`` suitable for an error payload (``{"message": ...}``). The record
the operation targeted is left untouched when one of these is raised.
"""


class TransitError(Exception):
    """Base exception for reservation and shipment errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(TransitError):
    """Input rejected before any state was read or written."""


class CapacityError(TransitError):
    """Trip has no seats left."""

    def __init__(self, trip_id, message: str = None):
        self.trip_id = trip_id
        super().__init__(message or f"Trip {trip_id} has no available seats")


class ConflictError(TransitError):
    """Status precondition failed (double-cancel, out-of-order transition)."""

    def __init__(self, message: str, current_status: str = None):
        self.current_status = current_status
        super().__init__(message)


class IdentityMismatchError(TransitError):
    """Supplied receiver ID does not match the one recorded at booking."""

    def __init__(self, tracking_number: str):
        self.tracking_number = tracking_number
        super().__init__(
            f"Receiver ID does not match the ID registered for package {tracking_number}"
        )


class NotFoundError(TransitError):
    """Unknown booking, package, ticket number or tracking number."""

    def __init__(self, kind: str, key):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' not found")


class SequenceError(TransitError):
    """Base exception for identifier sequence errors."""


class SequenceExhaustedError(SequenceError):
    """Daily identifier space is used up.

    This is a configuration error: the sequence never wraps around.
    """

    def __init__(self, kind: str, day):
        self.kind = kind
        self.day = day
        super().__init__(f"Daily '{kind}' sequence exhausted for {day:%Y-%m-%d}")


class NotifierError(TransitError):
    """Error raised by a notifier while delivering a message."""

    def __init__(self, message: str, notifier: str, original_error: Exception = None):
        self.notifier = notifier
        self.original_error = original_error
        super().__init__(f"[{notifier}] {message}")


class NotifierLoadError(NotifierError):
    """Configured notifier cannot be imported."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load notifier '{path}': {reason}", notifier=path)
