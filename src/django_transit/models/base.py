"""Abstract base model for reservation records.

Reservations are never physically deleted: every later change is a status
transition recorded in the audit trail.
"""
import uuid

from django.db import models


class TransitModel(models.Model):
    """UUID primary key plus created/updated timestamps.

    delete() is refused; cancel the record instead.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def delete(self, using=None, keep_parents=False):
        from ..exceptions import ConflictError

        raise ConflictError(
            f"{self._meta.verbose_name} {self.pk} cannot be deleted; cancel it instead"
        )
