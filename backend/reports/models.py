from __future__ import annotations

from django.conf import settings
from django.db import models


class Report(models.Model):
    """Abuse report against a listing. Rows are never updated."""

    listing = models.ForeignKey(
        "market.Listing",
        on_delete=models.CASCADE,
        related_name="abuse_reports",
    )
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="submitted_reports",
    )

    reason = models.CharField(max_length=120)
    additional_info = models.TextField(blank=True)
    contact_info = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["listing", "created_at"], name="rpt_listing_created_idx"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Report({self.id})"
