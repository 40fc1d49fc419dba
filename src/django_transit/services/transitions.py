"""Guarded status transitions shared by bookings and packages."""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.utils import timezone

from ..exceptions import ConflictError, NotFoundError
from ..lifecycle import StateMachine, can_transition

logger = logging.getLogger(__name__)


def _get_constraint_name(exc: IntegrityError) -> str | None:
    """Extract PostgreSQL constraint name from IntegrityError.

    Returns constraint name if available, None otherwise.
    """
    if exc.__cause__ and hasattr(exc.__cause__, "diag"):
        return exc.__cause__.diag.constraint_name
    return None


def transition_status(
    model,
    pk,
    *,
    machine: StateMachine,
    status_field: str,
    to_status: str,
    label: str,
    changes: dict = None,
):
    """Move one record to to_status if its machine allows it.

    The current status is read and then used as the precondition of a
    conditional UPDATE. If a concurrent transition wins the race the UPDATE
    matches no row and ConflictError is raised; the loser never overwrites.

    Args:
        model: Booking or Package
        pk: Primary key of the record
        machine: State machine governing status_field
        status_field: Name of the status column
        to_status: Target status
        label: Record kind used in error messages ("Booking", "Package")
        changes: Additional column values written with the status

    Returns:
        (instance, from_status) with instance re-read after the update

    Raises:
        NotFoundError: No record with pk
        ConflictError: Transition not allowed from the current status
    """
    try:
        current = model.objects.values_list(status_field, flat=True).get(pk=pk)
    except (model.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError(label, pk)

    if not can_transition(machine, current, to_status):
        raise ConflictError(
            f"{label} cannot move from {current} to {to_status}",
            current_status=current,
        )

    updated = model.objects.filter(pk=pk, **{status_field: current}).update(
        **{status_field: to_status},
        **(changes or {}),
        updated_at=timezone.now(),
    )
    if not updated:
        latest = model.objects.filter(pk=pk).values_list(status_field, flat=True).first()
        logger.info(f"{label} {pk} changed concurrently: {current} -> {latest}, wanted {to_status}")
        raise ConflictError(
            f"{label} cannot move from {latest} to {to_status}",
            current_status=latest,
        )

    return model.objects.select_related("trip").get(pk=pk), current
