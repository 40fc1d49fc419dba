"""Tests for status transition tables and status presentation."""
import pytest

from django_transit.lifecycle import (
    BOOKING_MACHINE,
    PACKAGE_MACHINE,
    BookingStatus,
    PackageStatus,
    StateMachine,
    allowed_transitions,
    can_transition,
    describe,
    is_terminal,
    validate_machine,
)


class TestTransitionTables:
    """Test suite for the booking and package machines."""

    def test_shipped_machines_are_valid(self):
        assert validate_machine(BOOKING_MACHINE) == []
        assert validate_machine(PACKAGE_MACHINE) == []

    def test_booking_leaves_confirmed_only(self):
        assert set(allowed_transitions(BOOKING_MACHINE, BookingStatus.CONFIRMED)) == {
            BookingStatus.CANCELLED,
            BookingStatus.NO_SHOW,
        }

    @pytest.mark.parametrize("status", [BookingStatus.CANCELLED, BookingStatus.NO_SHOW])
    def test_booking_terminal_states_are_final(self, status):
        assert is_terminal(BOOKING_MACHINE, status)
        assert allowed_transitions(BOOKING_MACHINE, status) == ()
        assert not can_transition(BOOKING_MACHINE, status, BookingStatus.CONFIRMED)

    def test_package_paths(self):
        assert can_transition(PACKAGE_MACHINE, PackageStatus.IN_TRANSIT, PackageStatus.ARRIVED)
        assert can_transition(PACKAGE_MACHINE, PackageStatus.ARRIVED, PackageStatus.COLLECTED)
        assert can_transition(PACKAGE_MACHINE, PackageStatus.IN_TRANSIT, PackageStatus.CANCELLED)
        assert can_transition(PACKAGE_MACHINE, PackageStatus.ARRIVED, PackageStatus.CANCELLED)

    def test_package_cannot_skip_arrival(self):
        assert not can_transition(PACKAGE_MACHINE, PackageStatus.IN_TRANSIT, PackageStatus.COLLECTED)

    def test_collected_package_cannot_be_cancelled(self):
        assert not can_transition(PACKAGE_MACHINE, PackageStatus.COLLECTED, PackageStatus.CANCELLED)

    def test_unknown_status_has_no_transitions(self):
        assert allowed_transitions(PACKAGE_MACHINE, "LOST") == ()


class TestValidateMachine:
    """validate_machine reports broken tables."""

    def test_reports_reversal_and_unreachable_state(self):
        machine = StateMachine(
            name="broken",
            states=("A", "B", "C"),
            initial_state="A",
            transitions={"A": ("B",), "B": ("A",)},
            terminal_states=frozenset({"C"}),
        )

        errors = validate_machine(machine)

        assert "transition 'B' -> 'A' reverts to initial_state" in errors
        assert "state 'C' unreachable from initial_state" in errors

    def test_reports_outgoing_transition_from_terminal(self):
        machine = StateMachine(
            name="broken",
            states=("A", "B", "C"),
            initial_state="A",
            transitions={"A": ("B",), "B": ("C",)},
            terminal_states=frozenset({"B"}),
        )

        assert "terminal state 'B' has outgoing transitions" in validate_machine(machine)

    def test_reports_unknown_states(self):
        machine = StateMachine(
            name="broken",
            states=("A",),
            initial_state="Z",
            transitions={"A": ("Q",)},
            terminal_states=frozenset(),
        )

        errors = validate_machine(machine)

        assert "initial_state 'Z' not in states" in errors
        assert "transition to unknown state 'Q'" in errors


class TestDescribe:
    """Test suite for describe()."""

    def test_arrived_package(self):
        d = describe(PackageStatus.ARRIVED)

        assert d.label == "Arrived"
        assert d.tone == "success"
        assert d.message == "Package has arrived - Ready for collection"
        assert d.terminal is False

    def test_collected_is_terminal(self):
        assert describe(PackageStatus.COLLECTED).terminal is True

    def test_cancelled_defaults_to_package_wording(self):
        assert describe("CANCELLED").message == "Package delivery was cancelled"

    def test_cancelled_booking_wording(self):
        d = describe("CANCELLED", "booking")

        assert d.message == "Booking was cancelled"
        assert d.terminal is True

    def test_booking_only_status_resolves_without_kind(self):
        assert describe("NO_SHOW").label == "No Show"

    def test_unknown_status_is_neutral(self):
        d = describe("LOST", "package")

        assert d.tone == "neutral"
        assert d.message == "Unknown status"
        assert d.label == "Lost"
