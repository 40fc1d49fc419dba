"""Package shipment model."""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from ..lifecycle import PackageStatus
from .base import TransitModel
from .bookings import PaymentMethod


class Package(TransitModel):
    """Cargo booked on a trip, independent of passenger seats.

    The receiver's ID number is required at booking: collection is only
    allowed on an exact match against it.
    """

    tracking_number = models.CharField(max_length=20, unique=True, editable=False)
    trip = models.ForeignKey(
        "django_transit.Trip",
        on_delete=models.PROTECT,
        related_name="packages",
    )

    # === Sender ===
    sender_names = models.CharField(max_length=200)
    sender_phone = models.CharField(max_length=30)
    sender_email = models.EmailField(blank=True)
    sender_id_number = models.CharField(max_length=50, blank=True)

    # === Receiver ===
    receiver_names = models.CharField(max_length=200)
    receiver_phone = models.CharField(max_length=30)
    receiver_email = models.EmailField(blank=True)
    receiver_id_number = models.CharField(max_length=50)

    # === Cargo ===
    package_weight = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Weight in kilograms",
    )
    declared_value = models.PositiveIntegerField(null=True, blank=True)
    is_fragile = models.BooleanField(default=False)
    description = models.CharField(max_length=255, blank=True)

    # === Commerce ===
    price = models.PositiveIntegerField(help_text="Price locked at booking time")
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)

    # === Lifecycle ===
    package_status = models.CharField(
        max_length=20,
        choices=PackageStatus.choices,
        default=PackageStatus.IN_TRANSIT,
    )
    booking_date = models.DateTimeField(default=timezone.now)
    expected_arrival_time = models.DateTimeField(null=True, blank=True)
    actual_arrival_time = models.DateTimeField(null=True, blank=True)

    collected_at = models.DateTimeField(null=True, blank=True)
    collected_by_name = models.CharField(max_length=200, blank=True)
    collected_by_id = models.CharField(max_length=50, blank=True)

    cancellation_reason = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transit_packages_cancelled",
    )
    booked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transit_packages_booked",
    )

    class Meta:
        app_label = "django_transit"
        ordering = ["-booking_date"]
        indexes = [
            models.Index(fields=["trip", "package_status"], name="transit_pkg_trip_status_idx"),
            models.Index(fields=["sender_phone"], name="transit_pkg_sender_phone_idx"),
            models.Index(fields=["receiver_phone"], name="transit_pkg_receiver_phone_idx"),
            models.Index(fields=["booking_date"], name="transit_pkg_date_idx"),
        ]

    def __str__(self):
        return f"{self.tracking_number} ({self.package_status})"
