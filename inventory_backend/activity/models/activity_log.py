# activity/models/activity_log.py

"""
ACTIVITY LOG (APPEND-ONLY)

One row per ledger mutation, written in the same transaction.

GUARANTEES:
- Created once, never edited
- Never deleted through the ORM
- actor/timestamp come from the caller (no ambient request context)
"""

from django.core.exceptions import ValidationError
from django.db import models


class ActivityLog(models.Model):
    class Activity(models.TextChoices):
        CREATE = "CREATE", "Create"
        MODIFY = "MODIFY", "Modify"
        DELETE = "DELETE", "Delete"

    activity = models.CharField(max_length=10, choices=Activity.choices)
    description = models.TextField()

    actor = models.CharField(max_length=150)
    timestamp = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["activity", "timestamp"], name="activity_kind_ts_idx"),
            models.Index(fields=["actor", "timestamp"], name="activity_actor_ts_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("ActivityLog records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("ActivityLog records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.timestamp:%Y-%m-%d %H:%M} | {self.activity} | {self.description}"
