"""Passenger booking lifecycle.

Seat allocation is serialized per trip by locking the trip row; the
available_seats counter and the set of held seats change in the same
transaction. Status changes after creation go through transition_status().
"""

import logging
from datetime import timedelta

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from ..audit import Actions, record_status_change
from ..conf import get_setting
from ..contracts import Customer
from ..exceptions import CapacityError, ConflictError, NotFoundError, ValidationError
from ..identifiers import IdentifierKind, next_identifier
from ..lifecycle import BOOKING_MACHINE, BookingStatus
from ..models import Booking, PaymentMethod, PaymentStatus, Trip
from .notifications import Events, enqueue, recipients_for
from .transitions import _get_constraint_name, transition_status

logger = logging.getLogger(__name__)


def _validate_customer(customer: Customer) -> None:
    if not (customer.names or "").strip():
        raise ValidationError("customerName is required")
    if not (customer.phone_number or "").strip():
        raise ValidationError("customerPhone is required")


def _validate_payment(payment_method: str, payment_status: str) -> None:
    if payment_method not in PaymentMethod.values:
        raise ValidationError(
            f"paymentMethod must be one of {', '.join(PaymentMethod.values)}, got {payment_method!r}"
        )
    if payment_status not in PaymentStatus.values:
        raise ValidationError(f"Unknown payment status {payment_status!r}")


def _lowest_free_seat(trip: Trip) -> int | None:
    held = set(
        Booking.objects.filter(trip=trip)
        .exclude(booking_status=BookingStatus.CANCELLED)
        .values_list("seat_number", flat=True)
    )
    for seat in range(1, trip.capacity + 1):
        if seat not in held:
            return seat
    return None


def _route(trip: Trip) -> str:
    return f"{trip.origin} - {trip.destination}"


def _lock_trip(trip) -> Trip:
    trip_id = getattr(trip, "pk", trip)
    try:
        return Trip.objects.select_for_update().get(pk=trip_id)
    except (Trip.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError("Trip", trip_id)


@transaction.atomic
def create_booking(
    trip,
    customer: Customer,
    payment_method: str,
    *,
    actor=None,
    payment_status: str = PaymentStatus.PAID,
) -> Booking:
    """Reserve the lowest free seat on trip for customer.

    Args:
        trip: Trip instance or primary key
        customer: Passenger names and phone number
        payment_method: One of PaymentMethod
        actor: Staff user making the booking
        payment_status: Defaults to PAID (sales are taken at the counter)

    Returns:
        The CONFIRMED Booking with ticket number, seat and locked price

    Raises:
        ValidationError: Missing customer details or unknown payment method
        NotFoundError: Trip does not exist
        CapacityError: No seat left on the trip
        SequenceExhaustedError: Daily ticket numbers used up
    """
    _validate_customer(customer)
    _validate_payment(payment_method, payment_status)

    trip = _lock_trip(trip)
    if trip.available_seats <= 0:
        logger.warning(f"Trip {trip.pk} is full ({trip.capacity} seats)")
        raise CapacityError(trip.pk)

    seat = _lowest_free_seat(trip)
    if seat is None:
        logger.error(
            f"Trip {trip.pk} reports {trip.available_seats} available seats but all are held"
        )
        raise CapacityError(trip.pk)

    now = timezone.now()
    ticket_number = next_identifier(IdentifierKind.TICKET, now)

    try:
        booking = Booking.objects.create(
            ticket_number=ticket_number,
            trip=trip,
            seat_number=seat,
            customer_names=customer.names.strip(),
            customer_phone=customer.phone_number.strip(),
            price=trip.ticket_price,
            payment_method=payment_method,
            payment_status=payment_status,
            booking_status=BookingStatus.CONFIRMED,
            booking_date=now,
            booked_by=actor if getattr(actor, "pk", None) else None,
        )
    except IntegrityError as e:
        constraint = _get_constraint_name(e)
        if constraint == "transit_booking_one_active_per_seat":
            raise ConflictError(f"Seat {seat} on trip {trip.pk} is already held") from e
        raise

    Trip.objects.filter(pk=trip.pk).update(available_seats=F("available_seats") - 1)
    trip.available_seats -= 1

    record_status_change(
        target=booking,
        action=Actions.BOOKING_CREATED,
        from_status="",
        to_status=BookingStatus.CONFIRMED,
        actor=actor,
        changed_at=now,
        data={
            "trip_id": str(trip.pk),
            "seat_number": seat,
            "price": booking.price,
            "payment_method": payment_method,
        },
    )

    enqueue(
        Events.BOOKING_CREATED,
        booking,
        ticket_number,
        recipients_for(booking.customer_names, phone=booking.customer_phone),
        {
            "seat_number": seat,
            "route": _route(trip),
            "departure": timezone.localtime(trip.departure_time).strftime("%Y-%m-%d %H:%M"),
            "price": booking.price,
        },
    )

    logger.info(f"Booked {ticket_number} seat {seat} on trip {trip.pk}")
    return booking


def cancel_booking(booking_id, reason: str, *, actor=None) -> Booking:
    """Cancel a CONFIRMED booking and release its seat.

    Args:
        booking_id: Booking primary key
        reason: Why the booking is cancelled (required)
        actor: Staff user cancelling

    Returns:
        The CANCELLED Booking

    Raises:
        ValidationError: Blank reason
        NotFoundError: No such booking
        ConflictError: Booking is not CONFIRMED
    """
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A cancellation reason is required")

    now = timezone.now()
    with transaction.atomic():
        booking, from_status = transition_status(
            Booking,
            booking_id,
            machine=BOOKING_MACHINE,
            status_field="booking_status",
            to_status=BookingStatus.CANCELLED,
            label="Booking",
            changes={
                "cancellation_reason": reason,
                "cancelled_at": now,
                "cancelled_by": actor if getattr(actor, "pk", None) else None,
            },
        )

        released = Trip.objects.filter(
            pk=booking.trip_id,
            available_seats__lt=F("capacity"),
        ).update(available_seats=F("available_seats") + 1)
        if not released:
            logger.error(f"Trip {booking.trip_id} already at capacity when releasing {booking}")

        record_status_change(
            target=booking,
            action=Actions.BOOKING_CANCELLED,
            from_status=from_status,
            to_status=BookingStatus.CANCELLED,
            actor=actor,
            reason=reason,
            changed_at=now,
            data={"seat_number": booking.seat_number},
        )

        enqueue(
            Events.BOOKING_CANCELLED,
            booking,
            booking.ticket_number,
            recipients_for(booking.customer_names, phone=booking.customer_phone),
            {"route": _route(booking.trip), "reason": reason},
        )

    logger.info(f"Cancelled {booking.ticket_number}: {reason}")
    return booking


def mark_no_show(booking_id, *, actor=None, now=None) -> Booking:
    """Record that the passenger did not travel.

    Only allowed once the trip departed more than
    TRANSIT_NO_SHOW_GRACE_MINUTES ago. The seat stays held.

    Raises:
        NotFoundError: No such booking
        ConflictError: Booking is not CONFIRMED, or the trip has not departed
    """
    now = now or timezone.now()
    grace = timedelta(minutes=get_setting("NO_SHOW_GRACE_MINUTES"))

    try:
        booking = Booking.objects.select_related("trip").get(pk=booking_id)
    except (Booking.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError("Booking", booking_id)

    if now < booking.trip.departure_time + grace:
        raise ConflictError(
            f"Trip for {booking.ticket_number} has not departed yet",
            current_status=booking.booking_status,
        )

    with transaction.atomic():
        booking, from_status = transition_status(
            Booking,
            booking.pk,
            machine=BOOKING_MACHINE,
            status_field="booking_status",
            to_status=BookingStatus.NO_SHOW,
            label="Booking",
        )
        record_status_change(
            target=booking,
            action=Actions.BOOKING_NO_SHOW,
            from_status=from_status,
            to_status=BookingStatus.NO_SHOW,
            actor=actor,
            changed_at=now,
        )
    return booking
