"""Trip model: a dated, scheduled instance of a route.

Trips are materialized by the external trip-generation scheduler. This app
reads them and owns only the available_seats counter.
"""

from django.db import models
from django.db.models import F, Q

from .base import TransitModel


class Trip(TransitModel):
    """A scheduled trip that passengers and packages are booked on."""

    origin = models.CharField(max_length=100)
    destination = models.CharField(max_length=100)
    departure_time = models.DateTimeField()
    estimated_arrival_time = models.DateTimeField(null=True, blank=True)

    capacity = models.PositiveIntegerField(help_text="Total passenger seats")
    available_seats = models.PositiveIntegerField(
        help_text="Seats not held by a non-cancelled booking"
    )
    ticket_price = models.PositiveIntegerField(help_text="Passenger fare in whole currency units")

    class Meta:
        app_label = "django_transit"
        ordering = ["departure_time"]
        constraints = [
            models.CheckConstraint(
                condition=Q(available_seats__lte=F("capacity")),
                name="transit_trip_seats_within_capacity",
            ),
        ]
        indexes = [
            models.Index(fields=["departure_time"], name="transit_trip_departure_idx"),
        ]

    def __str__(self):
        return f"{self.origin} -> {self.destination} @ {self.departure_time:%Y-%m-%d %H:%M}"

    def save(self, *args, **kwargs):
        if self._state.adding and self.available_seats is None:
            self.available_seats = self.capacity
        super().save(*args, **kwargs)

    @property
    def is_full(self) -> bool:
        return self.available_seats <= 0
