"""Outbox of notifications produced by lifecycle events."""

from django.contrib.contenttypes.fields import GenericForeignKey
from django.db import models
from django.utils import timezone


class Channel(models.TextChoices):
    """Delivery channels."""

    SMS = "sms", "SMS"
    EMAIL = "email", "Email"


class NotificationStatus(models.TextChoices):
    """Delivery status of an outbox row."""

    PENDING = "pending", "Pending"
    SENT = "sent", "Sent"
    FAILED = "failed", "Failed"


class Notification(models.Model):
    """A message queued for one recipient on one channel.

    Written in the same transaction as the lifecycle change that produced
    it and delivered after commit. Delivery outcome never affects the
    reservation.
    """

    event = models.CharField(max_length=50)
    reference = models.CharField(max_length=20, blank=True, help_text="Ticket or tracking number")
    channel = models.CharField(max_length=10, choices=Channel.choices)
    recipient_name = models.CharField(max_length=200, blank=True)
    address = models.CharField(max_length=255, help_text="Phone number or email address")
    subject = models.CharField(max_length=255, blank=True)
    body = models.TextField()

    target_type = models.ForeignKey(
        "contenttypes.ContentType",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="+",
    )
    target_id = models.CharField(max_length=255, blank=True)
    target = GenericForeignKey("target_type", "target_id")

    status = models.CharField(
        max_length=10,
        choices=NotificationStatus.choices,
        default=NotificationStatus.PENDING,
    )
    attempts = models.PositiveSmallIntegerField(default=0)
    next_attempt_at = models.DateTimeField(default=timezone.now)
    last_error = models.TextField(blank=True)
    provider_message_id = models.CharField(max_length=255, blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "django_transit"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["status", "next_attempt_at"], name="transit_outbox_due_idx"),
        ]

    def __str__(self):
        return f"{self.event} -> {self.address} ({self.status})"
