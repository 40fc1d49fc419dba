"""Audit trail adapter for reservation status changes.

All lifecycle code records status changes through this module, never by
creating StatusChange rows directly. This keeps action strings stable and
metadata consistent across bookings and packages.

Usage:
    from django_transit.audit import Actions, record_status_change

    record_status_change(
        target=booking,
        action=Actions.BOOKING_CANCELLED,
        from_status="CONFIRMED",
        to_status="CANCELLED",
        actor=user,
        reason="Passenger request",
    )
"""

import logging

from django.contrib.contenttypes.models import ContentType
from django.utils import timezone

from .models import StatusChange

logger = logging.getLogger(__name__)


class Actions:
    """Stable action strings stored in StatusChange.metadata["action"].

    These are part of the audit contract consumed by reporting.
    Add new actions as needed, but never rename existing ones.
    """

    BOOKING_CREATED = "booking_created"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_NO_SHOW = "booking_no_show"

    PACKAGE_BOOKED = "package_booked"
    PACKAGE_ARRIVED = "package_arrived"
    PACKAGE_COLLECTED = "package_collected"
    PACKAGE_CANCELLED = "package_cancelled"


def _get_actor_display(actor) -> str:
    """Get display string for actor."""
    if not actor:
        return "system"
    if getattr(actor, "email", ""):
        return actor.email
    if getattr(actor, "username", ""):
        return actor.username
    return str(actor)


def record_status_change(
    *,
    target,
    action: str,
    from_status: str,
    to_status: str,
    actor=None,
    reason: str = "",
    changed_at=None,
    data: dict = None,
) -> StatusChange:
    """Append one status change to target's history.

    Args:
        target: Booking or Package instance
        action: One of Actions
        from_status: Status before the change ("" on creation)
        to_status: Status after the change
        actor: User who made the change (None for system jobs)
        reason: Free-text justification (cancellations)
        changed_at: When the change took effect (default: now)
        data: Extra metadata merged after the action

    Returns:
        The created StatusChange
    """
    metadata = {"action": action}
    if data:
        metadata.update(data)

    change = StatusChange.objects.create(
        target_type=ContentType.objects.get_for_model(target),
        target_id=str(target.pk),
        from_status=from_status or "",
        to_status=to_status,
        actor=actor if getattr(actor, "pk", None) else None,
        actor_display=_get_actor_display(actor)[:200],
        reason=reason or "",
        changed_at=changed_at or timezone.now(),
        metadata=metadata,
    )
    logger.info(
        f"{action}: {target} {from_status or '-'} -> {to_status} by {change.actor_display}"
    )
    return change


def history_for(target):
    """Return target's status changes, oldest first."""
    return StatusChange.objects.filter(
        target_type=ContentType.objects.get_for_model(target),
        target_id=str(target.pk),
    ).order_by("changed_at", "id")
