"""Tests for read-side queries."""
from datetime import timedelta

import pytest
from django.utils import timezone

from django_transit.contracts import Party
from django_transit.exceptions import NotFoundError, ValidationError
from django_transit.lifecycle import BookingStatus, PackageStatus
from django_transit.selectors import (
    ReservationFilter,
    get_booking,
    get_booking_by_ticket,
    get_package,
    list_bookings,
    list_packages,
    package_statistics,
    packages_for_phone,
    track_package,
)
from django_transit.services import (
    book_package,
    cancel_booking,
    cancel_package,
    collect_package,
    create_booking,
    mark_arrived,
)


@pytest.mark.django_db
class TestListBookings:
    """Test suite for list_bookings."""

    def test_filters_by_status(self, trip, customer):
        kept = create_booking(trip, customer, "CASH")
        gone = create_booking(trip, customer, "CASH")
        cancel_booking(gone.pk, "Duplicate")

        confirmed = list_bookings(ReservationFilter(status=BookingStatus.CONFIRMED))

        assert list(confirmed) == [kept]

    def test_filters_by_several_statuses(self, trip, customer):
        create_booking(trip, customer, "CASH")
        gone = create_booking(trip, customer, "CASH")
        cancel_booking(gone.pk, "Duplicate")

        both = list_bookings(ReservationFilter(status=[BookingStatus.CONFIRMED, BookingStatus.CANCELLED]))

        assert both.count() == 2

    def test_unknown_status_rejected(self, db):
        with pytest.raises(ValidationError):
            list(list_bookings(ReservationFilter(status="LOST")))

    def test_filters_by_date_range(self, booking):
        today = timezone.localdate()

        assert list_bookings(ReservationFilter(date_from=today, date_to=today)).count() == 1
        assert list_bookings(ReservationFilter(date_from=today + timedelta(days=1))).count() == 0
        assert list_bookings(ReservationFilter(date_to=timezone.now() - timedelta(hours=1))).count() == 0

    def test_filters_by_trip_and_phone(self, booking, departed_trip, customer):
        create_booking(departed_trip, customer, "CASH")

        assert list_bookings(ReservationFilter(trip=booking.trip)).count() == 1
        assert list_bookings(ReservationFilter(phone=customer.phone_number)).count() == 2
        assert list_bookings(ReservationFilter(phone="+250700000000")).count() == 0


@pytest.mark.django_db
class TestLookups:
    """Single-record lookups."""

    def test_get_booking_by_ticket(self, booking):
        assert get_booking_by_ticket(booking.ticket_number.lower()) == booking

    def test_unknown_ticket(self, db):
        with pytest.raises(NotFoundError) as exc_info:
            get_booking_by_ticket("TKT-20000101-00001")

        assert exc_info.value.message == "Booking 'TKT-20000101-00001' not found"

    def test_get_by_id(self, booking, package):
        assert get_booking(booking.pk) == booking
        assert get_package(str(package.pk)) == package

    def test_malformed_id(self, db):
        with pytest.raises(NotFoundError):
            get_package("123")


@pytest.mark.django_db
class TestTrackPackage:
    """Test suite for track_package."""

    def test_public_view(self, package):
        info = track_package(package.tracking_number)

        assert info.status == PackageStatus.IN_TRANSIT
        assert info.origin == "Kigali"
        assert info.destination == "Huye"
        assert info.receiver_names == "Grace Ineza"

    def test_hides_identity_numbers(self, package):
        info = track_package(package.tracking_number)

        assert not hasattr(info, "receiver_id_number")
        assert not hasattr(info, "sender_id_number")

    def test_reflects_arrival(self, package):
        mark_arrived(package.pk)

        info = track_package(f"  {package.tracking_number}  ")

        assert info.status == PackageStatus.ARRIVED
        assert info.actual_arrival_time is not None

    def test_unknown_tracking_number(self, db):
        with pytest.raises(NotFoundError):
            track_package("PKG-20000101-00001")


@pytest.mark.django_db
class TestCustomerPackages:
    """Packages by phone and per-customer statistics."""

    @pytest.fixture
    def shipments(self, trip, sender, receiver):
        other = Party(names="Paul", phone="+250788000999", id_number="X1")
        a = book_package(trip, sender, receiver, "1", payment_method="CASH")
        b = book_package(trip, sender, receiver, "1", payment_method="CASH")
        c = book_package(trip, sender, other, "1", payment_method="CASH")
        # sender also receives one package
        sender_as_receiver = Party(names=sender.names, phone=sender.phone, id_number="S1")
        d = book_package(trip, other, sender_as_receiver, "1", payment_method="CASH")
        mark_arrived(a.pk)
        collect_package(a.pk, receiver.id_number, receiver.names)
        mark_arrived(b.pk)
        cancel_package(c.pk, "Withdrawn")
        return a, b, c, d

    def test_packages_for_sender_and_receiver(self, shipments, sender, receiver):
        assert packages_for_phone(sender.phone).count() == 3
        assert packages_for_phone(sender.phone, role="receiver").count() == 1
        assert packages_for_phone(receiver.phone, role="receiver").count() == 2

    def test_invalid_role(self, db):
        with pytest.raises(ValidationError):
            packages_for_phone("+250788000111", role="courier")

    def test_statistics(self, shipments, sender):
        stats = package_statistics(sender.phone)

        assert stats.total_sent == 3
        assert stats.sent_collected == 1
        assert stats.sent_arrived == 1
        assert stats.sent_cancelled == 1
        assert stats.sent_in_transit == 0
        assert stats.total_received == 1
        assert stats.received_in_transit == 1

    def test_list_packages_by_phone_matches_either_side(self, shipments, sender):
        assert list_packages(ReservationFilter(phone=sender.phone)).count() == 4

    def test_list_packages_by_status(self, shipments):
        assert list_packages(ReservationFilter(status=PackageStatus.ARRIVED)).count() == 1
