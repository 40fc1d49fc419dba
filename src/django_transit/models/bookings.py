"""Passenger booking model."""

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from ..lifecycle import BookingStatus
from .base import TransitModel


class PaymentMethod(models.TextChoices):
    """How a reservation was paid."""

    CASH = "CASH", "Cash"
    MOBILE_MONEY = "MOBILE_MONEY", "Mobile Money"
    CARD = "CARD", "Card"


class PaymentStatus(models.TextChoices):
    """Payment state of a reservation."""

    PENDING = "PENDING", "Pending"
    PAID = "PAID", "Paid"
    REFUNDED = "REFUNDED", "Refunded"


class Booking(TransitModel):
    """A single passenger's reservation of one seat on a trip.

    ticket_number, trip, seat_number and price are fixed at creation.
    Later changes are status transitions only.
    """

    ticket_number = models.CharField(max_length=20, unique=True, editable=False)
    trip = models.ForeignKey(
        "django_transit.Trip",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    seat_number = models.PositiveIntegerField()

    customer_names = models.CharField(max_length=200)
    customer_phone = models.CharField(max_length=30)

    price = models.PositiveIntegerField(help_text="Fare locked at booking time")
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PAID,
    )

    booking_status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED,
    )
    booking_date = models.DateTimeField(default=timezone.now)

    booked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transit_bookings_made",
    )

    # Present only once CANCELLED
    cancellation_reason = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transit_bookings_cancelled",
    )

    class Meta:
        app_label = "django_transit"
        ordering = ["-booking_date"]
        constraints = [
            # A seat is held by at most one non-cancelled booking per trip
            models.UniqueConstraint(
                fields=["trip", "seat_number"],
                name="transit_booking_one_active_per_seat",
                condition=~Q(booking_status="CANCELLED"),
            ),
        ]
        indexes = [
            models.Index(fields=["trip", "booking_status"], name="transit_bkg_trip_status_idx"),
            models.Index(fields=["customer_phone"], name="transit_bkg_phone_idx"),
            models.Index(fields=["booking_date"], name="transit_bkg_date_idx"),
        ]

    def __str__(self):
        return f"{self.ticket_number} seat {self.seat_number} ({self.booking_status})"

    @property
    def is_active(self) -> bool:
        return self.booking_status == BookingStatus.CONFIRMED
