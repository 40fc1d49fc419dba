"""Payload-level API for host views and integrations.

Each function takes an upstream payload (a dict with the external field
names), runs the lifecycle operation and returns the response dict:

    from django_transit.api import create_booking

    try:
        body = create_booking(request_json, actor=request.user)
    except TransitError as e:
        return JsonResponse(error_payload(e), status=http_status(e))

Errors propagate as TransitError subclasses; http_status() maps them.
"""
from . import contracts, selectors, services
from .exceptions import (
    CapacityError,
    ConflictError,
    IdentityMismatchError,
    NotFoundError,
    ValidationError,
)

_HTTP_STATUS = (
    (ValidationError, 400),
    (IdentityMismatchError, 403),
    (NotFoundError, 404),
    (CapacityError, 409),
    (ConflictError, 409),
)


def http_status(exc) -> int:
    """Suggested HTTP status for a TransitError (500 when unmapped)."""
    for exc_class, status in _HTTP_STATUS:
        if isinstance(exc, exc_class):
            return status
    return 500


def create_booking(payload, actor=None):
    req = contracts.CreateBookingRequest.from_payload(payload)
    booking = services.create_booking(
        req.trip_id, req.customer, req.payment_method, actor=actor
    )
    return contracts.booking_created_response(booking)


def cancel_booking(payload, actor=None):
    req = contracts.CancelBookingRequest.from_payload(payload)
    booking = services.cancel_booking(req.booking_id, req.reason, actor=actor)
    return contracts.booking_to_dict(booking)


def book_package(payload, actor=None):
    req = contracts.BookPackageRequest.from_payload(payload)
    package = services.book_package(
        req.trip_id,
        req.sender,
        req.receiver,
        req.weight,
        payment_method=req.payment_method,
        declared_value=req.declared_value,
        is_fragile=req.is_fragile,
        description=req.description,
        actor=actor,
    )
    return contracts.package_booked_response(package)


def mark_arrived(payload, actor=None):
    req = contracts.MarkArrivedRequest.from_payload(payload)
    return contracts.package_to_dict(services.mark_arrived(req.package_id, actor=actor))


def collect_package(payload, actor=None):
    req = contracts.CollectPackageRequest.from_payload(payload)
    package = services.collect_package(
        req.package_id, req.receiver_id_number, req.collected_by_name, actor=actor
    )
    return contracts.package_to_dict(package)


def cancel_package(payload, actor=None):
    req = contracts.CancelPackageRequest.from_payload(payload)
    return contracts.package_to_dict(
        services.cancel_package(req.package_id, req.reason, actor=actor)
    )


def track(tracking_number):
    """Public tracking view for a tracking number."""
    return contracts.tracking_response(selectors.track_package(tracking_number))


def booking_by_ticket(ticket_number):
    return contracts.booking_to_dict(selectors.get_booking_by_ticket(ticket_number))


def my_statistics(phone):
    return contracts.statistics_response(selectors.package_statistics(phone))
