"""Read-side queries over bookings and packages.

Nothing here writes. Staff listings go through ReservationFilter; the
public tracking view goes through track_package(), which never exposes
identity documents.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Count, Q, QuerySet

from .exceptions import NotFoundError, ValidationError
from .lifecycle import BookingStatus, PackageStatus
from .models import Booking, Package


@dataclass(frozen=True)
class ReservationFilter:
    """Listing filter shared by bookings and packages.

    Attributes:
        status: One status or several; matches any
        date_from: Earliest booking date (inclusive); date or datetime
        date_to: Latest booking date (inclusive); date or datetime
        trip: Trip instance or primary key
        phone: Customer phone (bookings) or sender/receiver phone (packages)
    """

    status: Union[str, Iterable[str], None] = None
    date_from: Union[date, datetime, None] = None
    date_to: Union[date, datetime, None] = None
    trip: object = None
    phone: Optional[str] = None


def _statuses(status) -> list[str]:
    if isinstance(status, str):
        return [status]
    return list(status)


def _apply_common(qs: QuerySet, filters: ReservationFilter, status_field: str, valid) -> QuerySet:
    if filters.status:
        wanted = _statuses(filters.status)
        unknown = [s for s in wanted if s not in valid]
        if unknown:
            raise ValidationError(f"Unknown status filter: {', '.join(unknown)}")
        qs = qs.filter(**{f"{status_field}__in": wanted})

    if filters.date_from:
        if isinstance(filters.date_from, datetime):
            qs = qs.filter(booking_date__gte=filters.date_from)
        else:
            qs = qs.filter(booking_date__date__gte=filters.date_from)
    if filters.date_to:
        if isinstance(filters.date_to, datetime):
            qs = qs.filter(booking_date__lte=filters.date_to)
        else:
            qs = qs.filter(booking_date__date__lte=filters.date_to)

    if filters.trip is not None:
        qs = qs.filter(trip_id=getattr(filters.trip, "pk", filters.trip))
    return qs


def list_bookings(filters: ReservationFilter = None) -> QuerySet:
    """Bookings matching filters, newest first."""
    filters = filters or ReservationFilter()
    qs = Booking.objects.select_related("trip")
    qs = _apply_common(qs, filters, "booking_status", BookingStatus.values)
    if filters.phone:
        qs = qs.filter(customer_phone=filters.phone)
    return qs.order_by("-booking_date")


def list_packages(filters: ReservationFilter = None) -> QuerySet:
    """Packages matching filters, newest first."""
    filters = filters or ReservationFilter()
    qs = Package.objects.select_related("trip")
    qs = _apply_common(qs, filters, "package_status", PackageStatus.values)
    if filters.phone:
        qs = qs.filter(Q(sender_phone=filters.phone) | Q(receiver_phone=filters.phone))
    return qs.order_by("-booking_date")


def _get(model, label: str, **lookup):
    try:
        return model.objects.select_related("trip").get(**lookup)
    except (model.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError(label, next(iter(lookup.values())))


def get_booking(booking_id) -> Booking:
    return _get(Booking, "Booking", pk=booking_id)


def get_booking_by_ticket(ticket_number: str) -> Booking:
    return _get(Booking, "Booking", ticket_number=(ticket_number or "").strip().upper())


def get_package(package_id) -> Package:
    return _get(Package, "Package", pk=package_id)


def get_package_by_tracking(tracking_number: str) -> Package:
    return _get(Package, "Package", tracking_number=(tracking_number or "").strip().upper())


@dataclass(frozen=True)
class TrackingInfo:
    """What anyone holding a tracking number may see."""

    tracking_number: str
    status: str
    origin: str
    destination: str
    departure_time: datetime
    sender_names: str
    receiver_names: str
    package_weight: Decimal
    is_fragile: bool
    booking_date: datetime
    expected_arrival_time: Optional[datetime]
    actual_arrival_time: Optional[datetime]
    collected_at: Optional[datetime]


def track_package(tracking_number: str) -> TrackingInfo:
    """Public tracking lookup.

    Raises:
        NotFoundError: Unknown tracking number
    """
    package = get_package_by_tracking(tracking_number)
    return TrackingInfo(
        tracking_number=package.tracking_number,
        status=package.package_status,
        origin=package.trip.origin,
        destination=package.trip.destination,
        departure_time=package.trip.departure_time,
        sender_names=package.sender_names,
        receiver_names=package.receiver_names,
        package_weight=package.package_weight,
        is_fragile=package.is_fragile,
        booking_date=package.booking_date,
        expected_arrival_time=package.expected_arrival_time,
        actual_arrival_time=package.actual_arrival_time,
        collected_at=package.collected_at,
    )


def packages_for_phone(phone: str, role: str = "sender") -> QuerySet:
    """Packages sent ("sender") or received ("receiver") by phone."""
    if role == "sender":
        qs = Package.objects.filter(sender_phone=phone)
    elif role == "receiver":
        qs = Package.objects.filter(receiver_phone=phone)
    else:
        raise ValidationError(f"role must be 'sender' or 'receiver', got {role!r}")
    return qs.select_related("trip").order_by("-booking_date")


@dataclass(frozen=True)
class PackageStatistics:
    total_sent: int
    total_received: int
    sent_in_transit: int
    sent_arrived: int
    sent_collected: int
    sent_cancelled: int
    received_in_transit: int
    received_arrived: int
    received_collected: int
    received_cancelled: int


def _count_by_status(qs: QuerySet) -> dict:
    aggregates = {"total": Count("pk")}
    for status in PackageStatus:
        aggregates[status.value] = Count("pk", filter=Q(package_status=status))
    return qs.aggregate(**aggregates)


def package_statistics(phone: str) -> PackageStatistics:
    """Per-status package counts for a customer, as sender and as receiver."""
    sent = _count_by_status(Package.objects.filter(sender_phone=phone))
    received = _count_by_status(Package.objects.filter(receiver_phone=phone))
    return PackageStatistics(
        total_sent=sent["total"],
        total_received=received["total"],
        sent_in_transit=sent[PackageStatus.IN_TRANSIT],
        sent_arrived=sent[PackageStatus.ARRIVED],
        sent_collected=sent[PackageStatus.COLLECTED],
        sent_cancelled=sent[PackageStatus.CANCELLED],
        received_in_transit=received[PackageStatus.IN_TRANSIT],
        received_arrived=received[PackageStatus.ARRIVED],
        received_collected=received[PackageStatus.COLLECTED],
        received_cancelled=received[PackageStatus.CANCELLED],
    )
