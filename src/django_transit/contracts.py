"""Request and response contracts.

This is the one place where upstream payloads are mapped to canonical
values, and canonical records to response dicts. Field names on both sides
are load-bearing: other systems code against them. Lifecycle services only
ever see the canonical dataclasses defined here.

Upstream clients are not consistent about key names, so each canonical
field lists the keys it accepts, first match wins (FIELD_ALIASES). Revenue
fields are deliberately absent: responses always emit ``price`` and no
alternative key is read for it.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .exceptions import TransitError, ValidationError
from .lifecycle import describe

FIELD_ALIASES = {
    "dailyTripId": ("dailyTripId", "tripId", "dailyTrip"),
    "customerName": ("customerName", "customerNames", "names"),
    "customerPhone": ("customerPhone", "phoneNumber", "phone"),
    "paymentMethod": ("paymentMethod",),
    "bookingId": ("bookingId", "id"),
    "reason": ("reason", "cancellationReason"),
    "packageId": ("packageId", "id"),
    "senderNames": ("senderNames", "senderName"),
    "senderPhone": ("senderPhone",),
    "senderEmail": ("senderEmail",),
    "senderIdNumber": ("senderIdNumber",),
    "receiverNames": ("receiverNames", "receiverName"),
    "receiverPhone": ("receiverPhone",),
    "receiverEmail": ("receiverEmail",),
    "receiverIdNumber": ("receiverIdNumber",),
    "packageWeight": ("packageWeight", "weight"),
    "packageValue": ("packageValue", "declaredValue"),
    "isFragile": ("isFragile", "fragile"),
    "description": ("description", "packageDescription"),
    "collectedByName": ("collectedByName",),
}

_MISSING = object()


def _lookup(payload: dict, field: str):
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be an object")
    for key in FIELD_ALIASES.get(field, (field,)):
        value = payload.get(key, _MISSING)
        if value is not _MISSING and value is not None:
            # {"dailyTrip": {"id": ...}} style nesting
            if isinstance(value, dict) and "id" in value:
                return value["id"]
            return value
    return _MISSING


def _required_str(payload: dict, field: str) -> str:
    value = _lookup(payload, field)
    if value is _MISSING or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def _optional_str(payload: dict, field: str) -> str:
    value = _lookup(payload, field)
    if value is _MISSING:
        return ""
    return str(value).strip()


def _required_id(payload: dict, field: str):
    value = _lookup(payload, field)
    if value is _MISSING or str(value).strip() == "":
        raise ValidationError(f"{field} is required")
    return value


def _decimal(payload: dict, field: str, required: bool = True) -> Optional[Decimal]:
    value = _lookup(payload, field)
    if value is _MISSING or value == "":
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    if not number.is_finite():
        raise ValidationError(f"{field} must be a number, got {value!r}")
    return number


def _bool(payload: dict, field: str) -> bool:
    value = _lookup(payload, field)
    if value is _MISSING:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", ""):
        return False
    if isinstance(value, int):
        return bool(value)
    raise ValidationError(f"{field} must be true or false")


# =============================================================================
# Canonical values
# =============================================================================


@dataclass(frozen=True)
class Customer:
    """Passenger identity captured at booking."""

    names: str
    phone_number: str


@dataclass(frozen=True)
class Party:
    """Sender or receiver of a package."""

    names: str
    phone: str
    email: str = ""
    id_number: str = ""


@dataclass(frozen=True)
class CreateBookingRequest:
    trip_id: Any
    customer: Customer
    payment_method: str

    @classmethod
    def from_payload(cls, payload: dict) -> "CreateBookingRequest":
        return cls(
            trip_id=_required_id(payload, "dailyTripId"),
            customer=Customer(
                names=_required_str(payload, "customerName"),
                phone_number=_required_str(payload, "customerPhone"),
            ),
            payment_method=_required_str(payload, "paymentMethod").upper(),
        )


@dataclass(frozen=True)
class CancelBookingRequest:
    booking_id: Any
    reason: str

    @classmethod
    def from_payload(cls, payload: dict) -> "CancelBookingRequest":
        # Blank reasons are rejected by the lifecycle, not here
        return cls(
            booking_id=_required_id(payload, "bookingId"),
            reason=_optional_str(payload, "reason"),
        )


@dataclass(frozen=True)
class BookPackageRequest:
    trip_id: Any
    sender: Party
    receiver: Party
    weight: Decimal
    declared_value: Optional[int]
    is_fragile: bool
    payment_method: str
    description: str = ""

    @classmethod
    def from_payload(cls, payload: dict) -> "BookPackageRequest":
        declared = _decimal(payload, "packageValue", required=False)
        if declared is not None and declared != declared.to_integral_value():
            raise ValidationError(f"packageValue must be a whole number, got {declared}")
        return cls(
            trip_id=_required_id(payload, "dailyTripId"),
            sender=Party(
                names=_required_str(payload, "senderNames"),
                phone=_required_str(payload, "senderPhone"),
                email=_optional_str(payload, "senderEmail"),
                id_number=_optional_str(payload, "senderIdNumber"),
            ),
            receiver=Party(
                names=_required_str(payload, "receiverNames"),
                phone=_required_str(payload, "receiverPhone"),
                email=_optional_str(payload, "receiverEmail"),
                id_number=_required_str(payload, "receiverIdNumber"),
            ),
            weight=_decimal(payload, "packageWeight"),
            declared_value=int(declared) if declared is not None else None,
            is_fragile=_bool(payload, "isFragile"),
            payment_method=_required_str(payload, "paymentMethod").upper(),
            description=_optional_str(payload, "description"),
        )


@dataclass(frozen=True)
class MarkArrivedRequest:
    package_id: Any

    @classmethod
    def from_payload(cls, payload: dict) -> "MarkArrivedRequest":
        return cls(package_id=_required_id(payload, "packageId"))


@dataclass(frozen=True)
class CollectPackageRequest:
    package_id: Any
    receiver_id_number: str
    collected_by_name: str

    @classmethod
    def from_payload(cls, payload: dict) -> "CollectPackageRequest":
        value = _lookup(payload, "receiverIdNumber")
        if value is _MISSING or not str(value).strip():
            raise ValidationError("receiverIdNumber is required")
        return cls(
            package_id=_required_id(payload, "packageId"),
            # Compared verbatim against the registered ID
            receiver_id_number=str(value),
            collected_by_name=_required_str(payload, "collectedByName"),
        )


@dataclass(frozen=True)
class CancelPackageRequest:
    package_id: Any
    reason: str

    @classmethod
    def from_payload(cls, payload: dict) -> "CancelPackageRequest":
        return cls(
            package_id=_required_id(payload, "packageId"),
            reason=_optional_str(payload, "reason"),
        )


# =============================================================================
# Responses
# =============================================================================


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def trip_summary(trip) -> dict:
    return {
        "id": str(trip.pk),
        "origin": trip.origin,
        "destination": trip.destination,
        "departureTime": _iso(trip.departure_time),
        "estimatedArrivalTime": _iso(trip.estimated_arrival_time),
        "ticketPrice": trip.ticket_price,
    }


def booking_created_response(booking) -> dict:
    """Response of createBooking."""
    return {
        "id": str(booking.pk),
        "ticketNumber": booking.ticket_number,
        "seatNumber": booking.seat_number,
        "price": booking.price,
        "bookingStatus": booking.booking_status,
    }


def booking_to_dict(booking) -> dict:
    """Full booking representation."""
    return {
        **booking_created_response(booking),
        "dailyTrip": trip_summary(booking.trip),
        "customerName": booking.customer_names,
        "customerPhone": booking.customer_phone,
        "paymentMethod": booking.payment_method,
        "paymentStatus": booking.payment_status,
        "bookingDate": _iso(booking.booking_date),
        "cancellationReason": booking.cancellation_reason or None,
        "cancelledAt": _iso(booking.cancelled_at),
        "cancelledBy": str(booking.cancelled_by) if booking.cancelled_by_id else None,
        "status": _status_badge(booking.booking_status, "booking"),
    }


def package_booked_response(package) -> dict:
    """Response of bookPackage."""
    return {
        "trackingNumber": package.tracking_number,
        "price": package.price,
        "packageStatus": package.package_status,
    }


def package_to_dict(package) -> dict:
    """Full package representation for staff.

    Includes the receiver's ID number; never use it for public tracking.
    """
    return {
        "id": str(package.pk),
        **package_booked_response(package),
        "dailyTrip": trip_summary(package.trip),
        "senderNames": package.sender_names,
        "senderPhone": package.sender_phone,
        "senderEmail": package.sender_email or None,
        "senderIdNumber": package.sender_id_number or None,
        "receiverNames": package.receiver_names,
        "receiverPhone": package.receiver_phone,
        "receiverEmail": package.receiver_email or None,
        "receiverIdNumber": package.receiver_id_number,
        "packageWeight": str(package.package_weight),
        "packageValue": package.declared_value,
        "isFragile": package.is_fragile,
        "description": package.description or None,
        "paymentMethod": package.payment_method,
        "bookingDate": _iso(package.booking_date),
        "expectedArrivalTime": _iso(package.expected_arrival_time),
        "actualArrivalTime": _iso(package.actual_arrival_time),
        "collectedAt": _iso(package.collected_at),
        "collectedByName": package.collected_by_name or None,
        "collectedById": package.collected_by_id or None,
        "cancellationReason": package.cancellation_reason or None,
        "cancelledAt": _iso(package.cancelled_at),
        "status": _status_badge(package.package_status, "package"),
    }


def tracking_response(info) -> dict:
    """Public tracking view (no identity data)."""
    return {
        "trackingNumber": info.tracking_number,
        "packageStatus": info.status,
        "status": _status_badge(info.status, "package"),
        "origin": info.origin,
        "destination": info.destination,
        "departureTime": _iso(info.departure_time),
        "senderNames": info.sender_names,
        "receiverNames": info.receiver_names,
        "packageWeight": str(info.package_weight),
        "isFragile": info.is_fragile,
        "bookingDate": _iso(info.booking_date),
        "expectedArrivalTime": _iso(info.expected_arrival_time),
        "actualArrivalTime": _iso(info.actual_arrival_time),
        "collectedAt": _iso(info.collected_at),
    }


def statistics_response(stats) -> dict:
    return {
        "totalSent": stats.total_sent,
        "totalReceived": stats.total_received,
        "sentInTransit": stats.sent_in_transit,
        "sentArrived": stats.sent_arrived,
        "sentCollected": stats.sent_collected,
        "sentCancelled": stats.sent_cancelled,
        "receivedInTransit": stats.received_in_transit,
        "receivedArrived": stats.received_arrived,
        "receivedCollected": stats.received_collected,
        "receivedCancelled": stats.received_cancelled,
    }


def _status_badge(status: str, kind: str) -> dict:
    d = describe(status, kind)
    return {"label": d.label, "tone": d.tone, "icon": d.icon, "message": d.message}


def error_payload(exc: TransitError) -> dict:
    """Error body for a failed operation."""
    return {"message": exc.message}
