from __future__ import annotations

from django.conf import settings
from django.db import models

from market.models import TimestampedModel


class NotificationKind(models.TextChoices):
    LISTING_CREATED = "listing_created", "Listing created"
    LISTING_APPROVED = "listing_approved", "Listing approved"
    LISTING_BLOCKED = "listing_blocked", "Listing blocked"


class Notification(TimestampedModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    kind = models.CharField(max_length=64, choices=NotificationKind.choices, db_index=True)
    title = models.CharField(max_length=140, blank=True)
    body = models.TextField(blank=True)
    payload = models.JSONField(default=dict, blank=True)

    read_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "read_at", "created_at"], name="notif_user_read_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.kind} -> {self.user_id}"
