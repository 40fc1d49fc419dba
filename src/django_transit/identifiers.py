"""Ticket and tracking number generation.

Identifiers look like ``TKT-20261016-00042`` and ``PKG-20261016-00007``:
a kind prefix, the local calendar day, and a 5-digit counter that restarts
every day for every kind.
"""

import logging
from datetime import date, datetime

from django.db import IntegrityError, models, transaction
from django.utils import timezone

from .exceptions import SequenceExhaustedError
from .models import DailySequence

logger = logging.getLogger(__name__)

PAD_WIDTH = 5
MAX_SEQUENCE = 10 ** PAD_WIDTH - 1


class IdentifierKind(models.TextChoices):
    """Kinds of human-readable reference codes."""

    TICKET = "ticket", "Ticket number"
    TRACKING = "tracking", "Tracking number"


PREFIXES = {
    IdentifierKind.TICKET: "TKT",
    IdentifierKind.TRACKING: "PKG",
}


def format_identifier(kind: str, day: date, value: int) -> str:
    """Render an identifier, e.g. format_identifier('ticket', day, 7) -> 'TKT-20261016-00007'."""
    return f"{PREFIXES[IdentifierKind(kind)]}-{day:%Y%m%d}-{str(value).zfill(PAD_WIDTH)}"


def _calendar_day(when) -> date:
    if when is None:
        return timezone.localdate()
    if isinstance(when, datetime):
        return timezone.localdate(when) if timezone.is_aware(when) else when.date()
    return when


def next_identifier(kind: str, when=None) -> str:
    """
    Issue the next identifier of kind for the day of when.

    Uses select_for_update() on the (kind, day) counter row so concurrent
    callers never receive the same value. Call it inside the transaction
    that inserts the record carrying the identifier: if that insert rolls
    back, the increment rolls back with it.

    Args:
        kind: IdentifierKind.TICKET or IdentifierKind.TRACKING
        when: datetime or date the identifier is issued for (default: now)

    Returns:
        The formatted identifier (e.g., "TKT-20261016-00001")

    Raises:
        SequenceExhaustedError: If the day's counter already reached MAX_SEQUENCE
    """
    kind = IdentifierKind(kind)
    day = _calendar_day(when)

    with transaction.atomic():
        try:
            seq = DailySequence.objects.select_for_update().get(kind=kind, day=day)
        except DailySequence.DoesNotExist:
            try:
                with transaction.atomic():
                    DailySequence.objects.create(kind=kind, day=day, current_value=0)
            except IntegrityError:
                # Another caller created today's row first
                pass
            seq = DailySequence.objects.select_for_update().get(kind=kind, day=day)

        if seq.current_value >= MAX_SEQUENCE:
            logger.error(f"Identifier sequence exhausted: kind={kind} day={day}")
            raise SequenceExhaustedError(kind.value, day)

        seq.current_value += 1
        seq.save(update_fields=["current_value", "updated_at"])

        return format_identifier(kind, day, seq.current_value)
