"""Append-only status history for bookings and packages."""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.db import models
from django.utils import timezone


class StatusChange(models.Model):
    """
    One status change of a reservation.

    Records who changed the status, when, and why. Creation is recorded as
    a change from the empty status. Rows are never updated.
    """

    target_type = models.ForeignKey(
        "contenttypes.ContentType",
        on_delete=models.CASCADE,
        related_name="+",
    )
    # CharField for UUID support
    target_id = models.CharField(max_length=255)
    target = GenericForeignKey("target_type", "target_id")

    from_status = models.CharField(max_length=20, blank=True)
    to_status = models.CharField(max_length=20)

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transit_status_changes",
    )
    actor_display = models.CharField(max_length=200, blank=True)
    reason = models.TextField(blank=True)
    changed_at = models.DateTimeField(default=timezone.now)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        app_label = "django_transit"
        ordering = ["changed_at", "id"]
        indexes = [
            models.Index(
                fields=["target_type", "target_id", "changed_at"],
                name="transit_history_target_idx",
            ),
        ]

    def __str__(self):
        return f"{self.target_type.model}:{self.target_id} {self.from_status or '-'} -> {self.to_status}"
