"""Status vocabularies and transition tables for bookings and packages.

This is the single source of truth for which status changes are legal and
how each status is presented. Services consult it before writing; read-only
consumers (dashboards, reports) use describe() instead of re-deriving badges.

    Booking:  CONFIRMED -> {CANCELLED, NO_SHOW}
    Package:  IN_TRANSIT -> {ARRIVED, CANCELLED}
              ARRIVED    -> {COLLECTED, CANCELLED}
"""

from dataclasses import dataclass

from django.db import models


class BookingStatus(models.TextChoices):
    """Passenger booking status."""

    CONFIRMED = "CONFIRMED", "Confirmed"
    CANCELLED = "CANCELLED", "Cancelled"
    NO_SHOW = "NO_SHOW", "No Show"


class PackageStatus(models.TextChoices):
    """Package shipment status."""

    IN_TRANSIT = "IN_TRANSIT", "In Transit"
    ARRIVED = "ARRIVED", "Arrived"
    COLLECTED = "COLLECTED", "Collected"
    CANCELLED = "CANCELLED", "Cancelled"


@dataclass(frozen=True)
class StateMachine:
    """Transition table for one reservation kind."""

    name: str
    states: tuple[str, ...]
    initial_state: str
    transitions: dict
    terminal_states: frozenset


BOOKING_MACHINE = StateMachine(
    name="booking",
    states=tuple(BookingStatus.values),
    initial_state=BookingStatus.CONFIRMED,
    transitions={
        BookingStatus.CONFIRMED: (BookingStatus.CANCELLED, BookingStatus.NO_SHOW),
    },
    terminal_states=frozenset({BookingStatus.CANCELLED, BookingStatus.NO_SHOW}),
)

PACKAGE_MACHINE = StateMachine(
    name="package",
    states=tuple(PackageStatus.values),
    initial_state=PackageStatus.IN_TRANSIT,
    transitions={
        PackageStatus.IN_TRANSIT: (PackageStatus.ARRIVED, PackageStatus.CANCELLED),
        PackageStatus.ARRIVED: (PackageStatus.COLLECTED, PackageStatus.CANCELLED),
    },
    terminal_states=frozenset({PackageStatus.COLLECTED, PackageStatus.CANCELLED}),
)


def allowed_transitions(machine: StateMachine, status: str) -> tuple[str, ...]:
    """Return the states reachable in one step from status."""
    if status in machine.terminal_states:
        return ()
    return tuple(machine.transitions.get(status, ()))


def can_transition(machine: StateMachine, from_status: str, to_status: str) -> bool:
    return to_status in allowed_transitions(machine, from_status)


def is_terminal(machine: StateMachine, status: str) -> bool:
    return status in machine.terminal_states


def validate_machine(machine: StateMachine) -> list[str]:
    """
    Validate a transition table is sane and usable.

    Returns list of error messages (empty = valid).

    Checks:
    - initial_state and terminal_states exist in states
    - all transition sources and targets exist in states
    - terminal states have no outgoing transitions
    - no transition leads back to the initial state
    - all states reachable from initial_state
    """
    errors = []
    states_set = set(machine.states)

    if machine.initial_state not in states_set:
        errors.append(f"initial_state '{machine.initial_state}' not in states")

    for ts in machine.terminal_states:
        if ts not in states_set:
            errors.append(f"terminal_state '{ts}' not in states")

    for from_state, to_states in machine.transitions.items():
        if from_state not in states_set:
            errors.append(f"transition from unknown state '{from_state}'")
        for to_state in to_states:
            if to_state not in states_set:
                errors.append(f"transition to unknown state '{to_state}'")
            if to_state == machine.initial_state:
                errors.append(f"transition '{from_state}' -> '{to_state}' reverts to initial_state")

    for ts in machine.terminal_states:
        if machine.transitions.get(ts):
            errors.append(f"terminal state '{ts}' has outgoing transitions")

    if machine.initial_state in states_set:
        reachable = _find_reachable_states(machine.initial_state, machine.transitions)
        for state in machine.states:
            if state not in reachable:
                errors.append(f"state '{state}' unreachable from initial_state")

    return errors


def _find_reachable_states(start: str, transitions: dict) -> set[str]:
    """BFS over the transition table, including start itself."""
    visited = {start}
    queue = [start]

    while queue:
        current = queue.pop(0)
        for next_state in transitions.get(current, ()):
            if next_state not in visited:
                visited.add(next_state)
                queue.append(next_state)

    return visited


# =============================================================================
# Presentation
# =============================================================================


@dataclass(frozen=True)
class StatusDescription:
    """How a status is shown to staff and customers."""

    status: str
    label: str
    tone: str
    icon: str
    message: str
    terminal: bool


# status -> (tone, icon, message)
BOOKING_DESCRIPTIONS = {
    BookingStatus.CONFIRMED: ("success", "check-circle", "Seat reserved"),
    BookingStatus.CANCELLED: ("danger", "x-circle", "Booking was cancelled"),
    BookingStatus.NO_SHOW: ("warning", "alert-circle", "Passenger did not travel"),
}

PACKAGE_DESCRIPTIONS = {
    PackageStatus.IN_TRANSIT: ("info", "truck", "Your package is on the way"),
    PackageStatus.ARRIVED: ("success", "map-pin", "Package has arrived - Ready for collection"),
    PackageStatus.COLLECTED: ("accent", "check-circle", "Package has been delivered"),
    PackageStatus.CANCELLED: ("danger", "x-circle", "Package delivery was cancelled"),
}

_PRESENTATION = {
    BOOKING_MACHINE.name: (BOOKING_MACHINE, BookingStatus, BOOKING_DESCRIPTIONS),
    PACKAGE_MACHINE.name: (PACKAGE_MACHINE, PackageStatus, PACKAGE_DESCRIPTIONS),
}


def describe(status: str, kind: str = None) -> StatusDescription:
    """Return the presentation of a booking or package status.

    kind is "booking" or "package". It may be omitted when the status
    belongs to only one vocabulary; CANCELLED resolves to the package
    wording unless kind="booking" is given.
    """
    if kind is None:
        kind = PACKAGE_MACHINE.name if status in PackageStatus.values else BOOKING_MACHINE.name
    machine, choices, descriptions = _PRESENTATION[kind]

    if status not in choices.values:
        return StatusDescription(
            status=str(status),
            label=str(status).replace("_", " ").title(),
            tone="neutral",
            icon="package",
            message="Unknown status",
            terminal=False,
        )

    tone, icon, message = descriptions[status]
    return StatusDescription(
        status=str(status),
        label=choices(status).label,
        tone=tone,
        icon=icon,
        message=message,
        terminal=is_terminal(machine, status),
    )
