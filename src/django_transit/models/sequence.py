"""Daily counters behind ticket and tracking numbers."""

from django.db import models


class DailySequence(models.Model):
    """
    Per-kind, per-day counter.

    One row per (kind, day). The row is locked with select_for_update()
    while it is incremented, so two callers never read the same value.
    """

    kind = models.CharField(max_length=20, help_text="Identifier kind, e.g. 'ticket', 'tracking'")
    day = models.DateField()
    current_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "django_transit"
        constraints = [
            models.UniqueConstraint(fields=["kind", "day"], name="transit_sequence_one_per_kind_day"),
        ]

    def __str__(self):
        return f"{self.kind} {self.day:%Y-%m-%d}: {self.current_value}"
