# Generated manually for standalone django-transit package

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

PAYMENT_METHOD_CHOICES = [
    ("CASH", "Cash"),
    ("MOBILE_MONEY", "Mobile Money"),
    ("CARD", "Card"),
]


def _reservation_base_fields():
    return [
        (
            "id",
            models.UUIDField(
                default=uuid.uuid4,
                editable=False,
                primary_key=True,
                serialize=False,
            ),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("contenttypes", "0002_remove_content_type_name"),
    ]

    operations = [
        migrations.CreateModel(
            name="Trip",
            fields=_reservation_base_fields() + [
                ("origin", models.CharField(max_length=100)),
                ("destination", models.CharField(max_length=100)),
                ("departure_time", models.DateTimeField()),
                (
                    "estimated_arrival_time",
                    models.DateTimeField(blank=True, null=True),
                ),
                (
                    "capacity",
                    models.PositiveIntegerField(help_text="Total passenger seats"),
                ),
                (
                    "available_seats",
                    models.PositiveIntegerField(
                        help_text="Seats not held by a non-cancelled booking"
                    ),
                ),
                (
                    "ticket_price",
                    models.PositiveIntegerField(
                        help_text="Passenger fare in whole currency units"
                    ),
                ),
            ],
            options={
                "ordering": ["departure_time"],
                "indexes": [
                    models.Index(
                        fields=["departure_time"], name="transit_trip_departure_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("available_seats__lte", models.F("capacity"))
                        ),
                        name="transit_trip_seats_within_capacity",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DailySequence",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        help_text="Identifier kind, e.g. 'ticket', 'tracking'",
                        max_length=20,
                    ),
                ),
                ("day", models.DateField()),
                ("current_value", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("kind", "day"),
                        name="transit_sequence_one_per_kind_day",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=_reservation_base_fields() + [
                (
                    "ticket_number",
                    models.CharField(editable=False, max_length=20, unique=True),
                ),
                ("seat_number", models.PositiveIntegerField()),
                ("customer_names", models.CharField(max_length=200)),
                ("customer_phone", models.CharField(max_length=30)),
                (
                    "price",
                    models.PositiveIntegerField(help_text="Fare locked at booking time"),
                ),
                (
                    "payment_method",
                    models.CharField(choices=PAYMENT_METHOD_CHOICES, max_length=20),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("PAID", "Paid"),
                            ("REFUNDED", "Refunded"),
                        ],
                        default="PAID",
                        max_length=20,
                    ),
                ),
                (
                    "booking_status",
                    models.CharField(
                        choices=[
                            ("CONFIRMED", "Confirmed"),
                            ("CANCELLED", "Cancelled"),
                            ("NO_SHOW", "No Show"),
                        ],
                        default="CONFIRMED",
                        max_length=20,
                    ),
                ),
                (
                    "booking_date",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                ("cancellation_reason", models.TextField(blank=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "booked_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transit_bookings_made",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "cancelled_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transit_bookings_cancelled",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "trip",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="django_transit.trip",
                    ),
                ),
            ],
            options={
                "ordering": ["-booking_date"],
                "indexes": [
                    models.Index(
                        fields=["trip", "booking_status"],
                        name="transit_bkg_trip_status_idx",
                    ),
                    models.Index(
                        fields=["customer_phone"], name="transit_bkg_phone_idx"
                    ),
                    models.Index(fields=["booking_date"], name="transit_bkg_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(
                            ("booking_status", "CANCELLED"), _negated=True
                        ),
                        fields=("trip", "seat_number"),
                        name="transit_booking_one_active_per_seat",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Package",
            fields=_reservation_base_fields() + [
                (
                    "tracking_number",
                    models.CharField(editable=False, max_length=20, unique=True),
                ),
                ("sender_names", models.CharField(max_length=200)),
                ("sender_phone", models.CharField(max_length=30)),
                ("sender_email", models.EmailField(blank=True, max_length=254)),
                ("sender_id_number", models.CharField(blank=True, max_length=50)),
                ("receiver_names", models.CharField(max_length=200)),
                ("receiver_phone", models.CharField(max_length=30)),
                ("receiver_email", models.EmailField(blank=True, max_length=254)),
                ("receiver_id_number", models.CharField(max_length=50)),
                (
                    "package_weight",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Weight in kilograms",
                        max_digits=8,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.01"))
                        ],
                    ),
                ),
                ("declared_value", models.PositiveIntegerField(blank=True, null=True)),
                ("is_fragile", models.BooleanField(default=False)),
                ("description", models.CharField(blank=True, max_length=255)),
                (
                    "price",
                    models.PositiveIntegerField(
                        help_text="Price locked at booking time"
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(choices=PAYMENT_METHOD_CHOICES, max_length=20),
                ),
                (
                    "package_status",
                    models.CharField(
                        choices=[
                            ("IN_TRANSIT", "In Transit"),
                            ("ARRIVED", "Arrived"),
                            ("COLLECTED", "Collected"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="IN_TRANSIT",
                        max_length=20,
                    ),
                ),
                (
                    "booking_date",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "expected_arrival_time",
                    models.DateTimeField(blank=True, null=True),
                ),
                ("actual_arrival_time", models.DateTimeField(blank=True, null=True)),
                ("collected_at", models.DateTimeField(blank=True, null=True)),
                ("collected_by_name", models.CharField(blank=True, max_length=200)),
                ("collected_by_id", models.CharField(blank=True, max_length=50)),
                ("cancellation_reason", models.TextField(blank=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "booked_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transit_packages_booked",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "cancelled_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transit_packages_cancelled",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "trip",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="packages",
                        to="django_transit.trip",
                    ),
                ),
            ],
            options={
                "ordering": ["-booking_date"],
                "indexes": [
                    models.Index(
                        fields=["trip", "package_status"],
                        name="transit_pkg_trip_status_idx",
                    ),
                    models.Index(
                        fields=["sender_phone"], name="transit_pkg_sender_phone_idx"
                    ),
                    models.Index(
                        fields=["receiver_phone"],
                        name="transit_pkg_receiver_phone_idx",
                    ),
                    models.Index(fields=["booking_date"], name="transit_pkg_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StatusChange",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("target_id", models.CharField(max_length=255)),
                ("from_status", models.CharField(blank=True, max_length=20)),
                ("to_status", models.CharField(max_length=20)),
                ("actor_display", models.CharField(blank=True, max_length=200)),
                ("reason", models.TextField(blank=True)),
                (
                    "changed_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                ("metadata", models.JSONField(blank=True, default=dict)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transit_status_changes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "target_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to="contenttypes.contenttype",
                    ),
                ),
            ],
            options={
                "ordering": ["changed_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["target_type", "target_id", "changed_at"],
                        name="transit_history_target_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("event", models.CharField(max_length=50)),
                (
                    "reference",
                    models.CharField(
                        blank=True, help_text="Ticket or tracking number", max_length=20
                    ),
                ),
                (
                    "channel",
                    models.CharField(
                        choices=[("sms", "SMS"), ("email", "Email")], max_length=10
                    ),
                ),
                ("recipient_name", models.CharField(blank=True, max_length=200)),
                (
                    "address",
                    models.CharField(
                        help_text="Phone number or email address", max_length=255
                    ),
                ),
                ("subject", models.CharField(blank=True, max_length=255)),
                ("body", models.TextField()),
                ("target_id", models.CharField(blank=True, max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("sent", "Sent"),
                            ("failed", "Failed"),
                        ],
                        default="pending",
                        max_length=10,
                    ),
                ),
                ("attempts", models.PositiveSmallIntegerField(default=0)),
                (
                    "next_attempt_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                ("last_error", models.TextField(blank=True)),
                ("provider_message_id", models.CharField(blank=True, max_length=255)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "target_type",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to="contenttypes.contenttype",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["status", "next_attempt_at"],
                        name="transit_outbox_due_idx",
                    ),
                ],
            },
        ),
    ]
