"""Tests for the package shipment lifecycle."""
from decimal import Decimal

import pytest

from django_transit.audit import Actions, history_for
from django_transit.contracts import Party
from django_transit.exceptions import (
    ConflictError,
    IdentityMismatchError,
    NotFoundError,
    ValidationError,
)
from django_transit.lifecycle import PackageStatus
from django_transit.models import Notification, Package
from django_transit.services import (
    book_package,
    cancel_package,
    collect_package,
    mark_arrived,
)

RECEIVER_ID = "1199880012345678"


@pytest.mark.django_db
class TestBookPackage:
    """Test suite for book_package."""

    def test_books_in_transit_with_computed_price(self, package, trip):
        assert package.package_status == PackageStatus.IN_TRANSIT
        assert package.price == 3400
        assert package.package_weight == Decimal("2.5")
        assert package.tracking_number.startswith("PKG-")
        assert package.expected_arrival_time == trip.estimated_arrival_time

    def test_does_not_consume_seats(self, package, trip):
        trip.refresh_from_db()
        assert trip.available_seats == trip.capacity

    def test_minimum_price_applies(self, trip, sender, receiver):
        package = book_package(trip, sender, receiver, "0.1", payment_method="CASH")
        assert package.price == 2000

    def test_receiver_id_required(self, trip, sender):
        receiver = Party(names="Grace Ineza", phone="+250788000222", id_number="  ")

        with pytest.raises(ValidationError, match="receiverIdNumber"):
            book_package(trip, sender, receiver, "1", payment_method="CASH")

        assert not Package.objects.exists()

    @pytest.mark.parametrize("weight", ["0", "-2"])
    def test_non_positive_weight_rejected(self, trip, sender, receiver, weight):
        with pytest.raises(ValidationError):
            book_package(trip, sender, receiver, weight, payment_method="CASH")

    def test_price_is_computed_from_stored_weight(self, trip, sender, receiver):
        """2.555 kg is stored as 2.56 and priced as 2560 + 900."""
        package = book_package(trip, sender, receiver, "2.555", payment_method="CASH")
        package.refresh_from_db()

        assert package.package_weight == Decimal("2.56")
        assert package.price == 3460

    @pytest.mark.parametrize("weight", ["0.004", "1000000"])
    def test_weight_out_of_range_after_rounding_rejected(self, trip, sender, receiver, weight):
        with pytest.raises(ValidationError, match="packageWeight"):
            book_package(trip, sender, receiver, weight, payment_method="CASH")

        assert not Package.objects.exists()

    def test_negative_declared_value_rejected(self, trip, sender, receiver):
        with pytest.raises(ValidationError, match="packageValue"):
            book_package(trip, sender, receiver, "1", payment_method="CASH", declared_value=-5)

    def test_unknown_trip_raises_not_found(self, db, sender, receiver):
        with pytest.raises(NotFoundError):
            book_package("7f1d3f0e-2b8a-4c4e-9a57-1d1b2c3d4e5f", sender, receiver, "1", payment_method="CASH")

    def test_tracking_numbers_are_sequential(self, trip, sender, receiver):
        first = book_package(trip, sender, receiver, "1", payment_method="CASH")
        second = book_package(trip, sender, receiver, "1", payment_method="CASH")

        assert first.tracking_number.endswith("-00001")
        assert second.tracking_number.endswith("-00002")

    def test_notifies_sender_and_receiver(self, package):
        addresses = set(Notification.objects.values_list("address", flat=True))

        assert addresses == {"+250788000111", "jean@example.com", "+250788000222"}

    def test_records_price_breakdown(self, package):
        change = history_for(package).get()
        assert change.metadata["action"] == Actions.PACKAGE_BOOKED
        assert change.metadata["price"] == 3400
        assert change.metadata["minimumApplied"] is False


@pytest.mark.django_db
class TestMarkArrived:
    """Test suite for mark_arrived."""

    def test_marks_arrived_with_timestamp(self, package):
        result = mark_arrived(package.pk)

        assert result.package_status == PackageStatus.ARRIVED
        assert result.actual_arrival_time is not None

    def test_twice_conflicts(self, package):
        mark_arrived(package.pk)

        with pytest.raises(ConflictError):
            mark_arrived(package.pk)

    def test_cancelled_package_cannot_arrive(self, package):
        cancel_package(package.pk, "Sender withdrew")

        with pytest.raises(ConflictError):
            mark_arrived(package.pk)

    def test_notifies_receiver(self, package):
        Notification.objects.all().delete()

        mark_arrived(package.pk)

        notification = Notification.objects.get()
        assert notification.event == "PackageArrived"
        assert notification.address == "+250788000222"
        assert "Huye" in notification.body


@pytest.mark.django_db
class TestCollectPackage:
    """Test suite for collect_package."""

    def test_collects_with_matching_id(self, package):
        mark_arrived(package.pk)

        result = collect_package(package.pk, RECEIVER_ID, "Grace Ineza")

        assert result.package_status == PackageStatus.COLLECTED
        assert result.collected_by_name == "Grace Ineza"
        assert result.collected_by_id == RECEIVER_ID
        assert result.collected_at is not None

    def test_mismatch_leaves_arrived_and_is_retryable(self, package):
        mark_arrived(package.pk)

        with pytest.raises(IdentityMismatchError):
            collect_package(package.pk, "0000000000000000", "Impostor")

        package.refresh_from_db()
        assert package.package_status == PackageStatus.ARRIVED
        assert package.collected_at is None

        result = collect_package(package.pk, RECEIVER_ID, "Grace Ineza")
        assert result.package_status == PackageStatus.COLLECTED

    @pytest.mark.parametrize(
        "presented",
        [RECEIVER_ID + " ", " " + RECEIVER_ID, RECEIVER_ID[:-1]],
    )
    def test_id_match_is_exact(self, package, presented):
        mark_arrived(package.pk)

        with pytest.raises(IdentityMismatchError):
            collect_package(package.pk, presented, "Grace Ineza")

    def test_id_match_is_case_sensitive(self, trip, sender):
        receiver = Party(names="Eric", phone="+250788000333", id_number="PC123456")
        package = book_package(trip, sender, receiver, "1", payment_method="CASH")
        mark_arrived(package.pk)

        with pytest.raises(IdentityMismatchError):
            collect_package(package.pk, "pc123456", "Eric")

    def test_in_transit_package_cannot_be_collected(self, package):
        with pytest.raises(ConflictError):
            collect_package(package.pk, RECEIVER_ID, "Grace Ineza")

    def test_double_collect_conflicts(self, package):
        mark_arrived(package.pk)
        collect_package(package.pk, RECEIVER_ID, "Grace Ineza")

        with pytest.raises(ConflictError):
            collect_package(package.pk, RECEIVER_ID, "Grace Ineza")

    def test_blank_collector_name_rejected(self, package):
        mark_arrived(package.pk)

        with pytest.raises(ValidationError):
            collect_package(package.pk, RECEIVER_ID, " ")

        package.refresh_from_db()
        assert package.package_status == PackageStatus.ARRIVED

    def test_unknown_package_raises_not_found(self, db):
        with pytest.raises(NotFoundError):
            collect_package("7f1d3f0e-2b8a-4c4e-9a57-1d1b2c3d4e5f", RECEIVER_ID, "Grace")


@pytest.mark.django_db
class TestCancelPackage:
    """Test suite for cancel_package."""

    def test_cancel_from_in_transit(self, package, staff_user):
        result = cancel_package(package.pk, "Sender withdrew", actor=staff_user)

        assert result.package_status == PackageStatus.CANCELLED
        assert result.cancellation_reason == "Sender withdrew"
        assert result.cancelled_by == staff_user

    def test_cancel_from_arrived(self, package):
        mark_arrived(package.pk)

        assert cancel_package(package.pk, "Refused").package_status == PackageStatus.CANCELLED

    def test_cannot_cancel_collected(self, package):
        mark_arrived(package.pk)
        collect_package(package.pk, RECEIVER_ID, "Grace Ineza")

        with pytest.raises(ConflictError):
            cancel_package(package.pk, "Too late")

        package.refresh_from_db()
        assert package.package_status == PackageStatus.COLLECTED

    def test_blank_reason_rejected(self, package):
        with pytest.raises(ValidationError):
            cancel_package(package.pk, "")

    def test_full_history(self, package):
        mark_arrived(package.pk)
        cancel_package(package.pk, "Refused")

        transitions = [(c.from_status, c.to_status) for c in history_for(package)]
        assert transitions == [
            ("", PackageStatus.IN_TRANSIT),
            (PackageStatus.IN_TRANSIT, PackageStatus.ARRIVED),
            (PackageStatus.ARRIVED, PackageStatus.CANCELLED),
        ]
