import uuid

from django.db import models


class Event(models.Model):
    """A distribution camp. Every beneficiary is registered against one event."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_name = models.CharField(max_length=255)
    event_date = models.DateField(db_index=True)
    location = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "events"
        ordering = ["-event_date", "-created_at"]

    def __str__(self):
        return f"{self.event_name} ({self.event_date})"
