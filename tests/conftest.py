"""Pytest configuration for django-transit tests."""

from datetime import timedelta

import pytest
from django.utils import timezone

from tests.notifiers import RecordingNotifier


@pytest.fixture(autouse=True)
def recording_notifier():
    """Fresh RecordingNotifier state and notifier cache for every test."""
    from django_transit.conf import clear_notifier_cache

    RecordingNotifier.reset()
    clear_notifier_cache()
    yield RecordingNotifier
    RecordingNotifier.reset()
    clear_notifier_cache()


@pytest.fixture
def staff_user(db):
    """Create a staff user acting on reservations."""
    from django.contrib.auth import get_user_model

    User = get_user_model()
    return User.objects.create_user(
        username="agent",
        email="agent@example.com",
        password="testpass123",
    )


@pytest.fixture
def trip(db):
    """A trip departing tomorrow with 3 seats."""
    from django_transit.models import Trip

    departure = timezone.now() + timedelta(days=1)
    return Trip.objects.create(
        origin="Kigali",
        destination="Huye",
        departure_time=departure,
        estimated_arrival_time=departure + timedelta(hours=3),
        capacity=3,
        ticket_price=3000,
    )


@pytest.fixture
def departed_trip(db):
    """A trip that left two hours ago."""
    from django_transit.models import Trip

    departure = timezone.now() - timedelta(hours=2)
    return Trip.objects.create(
        origin="Kigali",
        destination="Musanze",
        departure_time=departure,
        estimated_arrival_time=departure + timedelta(hours=2),
        capacity=2,
        ticket_price=2500,
    )


@pytest.fixture
def customer():
    from django_transit.contracts import Customer

    return Customer(names="Alice Uwase", phone_number="+250788123456")


@pytest.fixture
def sender():
    from django_transit.contracts import Party

    return Party(names="Jean Mugabo", phone="+250788000111", email="jean@example.com")


@pytest.fixture
def receiver():
    from django_transit.contracts import Party

    return Party(names="Grace Ineza", phone="+250788000222", id_number="1199880012345678")


@pytest.fixture
def booking(trip, customer, staff_user):
    """A CONFIRMED booking on trip."""
    from django_transit.services import create_booking

    return create_booking(trip, customer, "CASH", actor=staff_user)


@pytest.fixture
def package(trip, sender, receiver, staff_user):
    """An IN_TRANSIT package on trip."""
    from django_transit.services import book_package

    return book_package(trip, sender, receiver, "2.5", payment_method="MOBILE_MONEY", actor=staff_user)
