"""Package shipment lifecycle.

Packages do not consume passenger seats. Collection hands the package over
only when the presented ID matches the receiver's registered ID exactly.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from ..audit import Actions, record_status_change
from ..contracts import Party
from ..exceptions import ConflictError, IdentityMismatchError, NotFoundError, ValidationError
from ..identifiers import IdentifierKind, next_identifier
from ..lifecycle import PACKAGE_MACHINE, PackageStatus
from ..models import Package, PaymentMethod, Trip
from ..pricing import compute_package_price, quantize_weight
from .notifications import Events, enqueue, recipients_for
from .transitions import transition_status

logger = logging.getLogger(__name__)


def _validate_party(party: Party, role: str) -> None:
    if not (party.names or "").strip():
        raise ValidationError(f"{role}Names is required")
    if not (party.phone or "").strip():
        raise ValidationError(f"{role}Phone is required")


def _fmt(value) -> str:
    return timezone.localtime(value).strftime("%Y-%m-%d %H:%M") if value else "-"


def _sender_recipients(package: Package):
    return recipients_for(package.sender_names, package.sender_phone, package.sender_email)


def _receiver_recipients(package: Package):
    return recipients_for(package.receiver_names, package.receiver_phone, package.receiver_email)


@transaction.atomic
def book_package(
    trip,
    sender: Party,
    receiver: Party,
    weight,
    *,
    payment_method: str,
    declared_value: int = None,
    is_fragile: bool = False,
    description: str = "",
    actor=None,
) -> Package:
    """Register a package on trip.

    The price is computed from weight and the trip's ticket price and locked
    on the package.

    Args:
        trip: Trip instance or primary key
        sender: Sender details
        receiver: Receiver details; id_number is required
        weight: Weight in kilograms, rounded half up to 0.01 kg before pricing
        payment_method: One of PaymentMethod
        declared_value: Optional declared value
        is_fragile: Handling flag
        description: Free-text contents
        actor: Staff user booking the package

    Returns:
        The IN_TRANSIT Package with tracking number and price

    Raises:
        ValidationError: Missing party details, receiver ID, bad weight or payment method
        NotFoundError: Trip does not exist
        SequenceExhaustedError: Daily tracking numbers used up
    """
    _validate_party(sender, "sender")
    _validate_party(receiver, "receiver")
    if not (receiver.id_number or "").strip():
        raise ValidationError("receiverIdNumber is required")
    if payment_method not in PaymentMethod.values:
        raise ValidationError(
            f"paymentMethod must be one of {', '.join(PaymentMethod.values)}, got {payment_method!r}"
        )
    if declared_value is not None and declared_value < 0:
        raise ValidationError("packageValue must not be negative")
    weight = quantize_weight(weight)

    trip_id = getattr(trip, "pk", trip)
    try:
        trip = Trip.objects.get(pk=trip_id)
    except (Trip.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError("Trip", trip_id)

    pricing = compute_package_price(weight, trip.ticket_price)

    now = timezone.now()
    tracking_number = next_identifier(IdentifierKind.TRACKING, now)

    package = Package.objects.create(
        tracking_number=tracking_number,
        trip=trip,
        sender_names=sender.names.strip(),
        sender_phone=sender.phone.strip(),
        sender_email=(sender.email or "").strip(),
        sender_id_number=(sender.id_number or "").strip(),
        receiver_names=receiver.names.strip(),
        receiver_phone=receiver.phone.strip(),
        receiver_email=(receiver.email or "").strip(),
        # Stored verbatim; collection compares it exactly
        receiver_id_number=receiver.id_number,
        package_weight=weight,
        declared_value=declared_value,
        is_fragile=is_fragile,
        description=description or "",
        price=pricing.price,
        payment_method=payment_method,
        package_status=PackageStatus.IN_TRANSIT,
        booking_date=now,
        expected_arrival_time=trip.estimated_arrival_time,
        booked_by=actor if getattr(actor, "pk", None) else None,
    )

    record_status_change(
        target=package,
        action=Actions.PACKAGE_BOOKED,
        from_status="",
        to_status=PackageStatus.IN_TRANSIT,
        actor=actor,
        changed_at=now,
        data={"trip_id": str(trip.pk), **pricing.as_dict()},
    )

    enqueue(
        Events.PACKAGE_BOOKED,
        package,
        tracking_number,
        _sender_recipients(package) + _receiver_recipients(package),
        {
            "sender": package.sender_names,
            "receiver": package.receiver_names,
            "route": f"{trip.origin} - {trip.destination}",
            "expected": _fmt(package.expected_arrival_time),
        },
    )

    logger.info(f"Booked package {tracking_number} on trip {trip.pk} for {pricing.price}")
    return package


def mark_arrived(package_id, *, actor=None) -> Package:
    """Record that an IN_TRANSIT package reached its destination.

    Raises:
        NotFoundError: No such package
        ConflictError: Package is not IN_TRANSIT
    """
    now = timezone.now()
    with transaction.atomic():
        package, from_status = transition_status(
            Package,
            package_id,
            machine=PACKAGE_MACHINE,
            status_field="package_status",
            to_status=PackageStatus.ARRIVED,
            label="Package",
            changes={"actual_arrival_time": now},
        )
        record_status_change(
            target=package,
            action=Actions.PACKAGE_ARRIVED,
            from_status=from_status,
            to_status=PackageStatus.ARRIVED,
            actor=actor,
            changed_at=now,
        )
        enqueue(
            Events.PACKAGE_ARRIVED,
            package,
            package.tracking_number,
            _receiver_recipients(package),
            {"destination": package.trip.destination},
        )
    return package


def collect_package(package_id, receiver_id_number: str, collected_by_name: str, *, actor=None) -> Package:
    """Hand an ARRIVED package over to the receiver.

    Args:
        package_id: Package primary key
        receiver_id_number: ID presented at the counter; must equal the
            registered receiver ID exactly (case-sensitive, not trimmed)
        collected_by_name: Name of the person collecting
        actor: Staff user handing over

    Raises:
        ValidationError: Blank collector name
        NotFoundError: No such package
        ConflictError: Package is not ARRIVED
        IdentityMismatchError: Presented ID does not match; package stays ARRIVED
    """
    collected_by_name = (collected_by_name or "").strip()
    if not collected_by_name:
        raise ValidationError("collectedByName is required")

    try:
        package = Package.objects.get(pk=package_id)
    except (Package.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError("Package", package_id)

    if package.package_status != PackageStatus.ARRIVED:
        raise ConflictError(
            f"Package cannot move from {package.package_status} to {PackageStatus.COLLECTED}",
            current_status=package.package_status,
        )

    if receiver_id_number != package.receiver_id_number:
        logger.warning(f"Collection of {package.tracking_number} refused: receiver ID mismatch")
        raise IdentityMismatchError(package.tracking_number)

    now = timezone.now()
    with transaction.atomic():
        package, from_status = transition_status(
            Package,
            package.pk,
            machine=PACKAGE_MACHINE,
            status_field="package_status",
            to_status=PackageStatus.COLLECTED,
            label="Package",
            changes={
                "collected_at": now,
                "collected_by_name": collected_by_name,
                "collected_by_id": receiver_id_number,
            },
        )
        record_status_change(
            target=package,
            action=Actions.PACKAGE_COLLECTED,
            from_status=from_status,
            to_status=PackageStatus.COLLECTED,
            actor=actor,
            changed_at=now,
            data={"collected_by_name": collected_by_name},
        )
        enqueue(
            Events.PACKAGE_COLLECTED,
            package,
            package.tracking_number,
            _sender_recipients(package),
            {"collected_by": collected_by_name, "collected_at": _fmt(now)},
        )
    return package


def cancel_package(package_id, reason: str, *, actor=None) -> Package:
    """Cancel a package that has not been collected.

    Raises:
        ValidationError: Blank reason
        NotFoundError: No such package
        ConflictError: Package is COLLECTED or already CANCELLED
    """
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A cancellation reason is required")

    now = timezone.now()
    with transaction.atomic():
        package, from_status = transition_status(
            Package,
            package_id,
            machine=PACKAGE_MACHINE,
            status_field="package_status",
            to_status=PackageStatus.CANCELLED,
            label="Package",
            changes={
                "cancellation_reason": reason,
                "cancelled_at": now,
                "cancelled_by": actor if getattr(actor, "pk", None) else None,
            },
        )
        record_status_change(
            target=package,
            action=Actions.PACKAGE_CANCELLED,
            from_status=from_status,
            to_status=PackageStatus.CANCELLED,
            actor=actor,
            reason=reason,
            changed_at=now,
        )
        enqueue(
            Events.PACKAGE_CANCELLED,
            package,
            package.tracking_number,
            _sender_recipients(package) + _receiver_recipients(package),
            {"reason": reason},
        )

    logger.info(f"Cancelled package {package.tracking_number}: {reason}")
    return package
