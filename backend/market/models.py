from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Province(TimestampedModel):
    code = models.CharField(max_length=16, unique=True)
    name = models.CharField(max_length=120, db_index=True)
    country = models.CharField(max_length=64, default="Argentina", db_index=True)
    country_code = models.CharField(max_length=2, default="AR")
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        indexes = [models.Index(fields=["country_code", "is_active"], name="prov_country_active_idx")]

    def __str__(self) -> str:
        return self.name


class Location(TimestampedModel):
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=160, db_index=True)
    province = models.ForeignKey(
        Province,
        on_delete=models.PROTECT,
        related_name="locations",
    )
    department_name = models.CharField(max_length=160, blank=True)
    country = models.CharField(max_length=64, default="Argentina")
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["province__name", "name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.province.name})"


class ListingStatus(models.TextChoices):
    UNDER_REVIEW = "underReview", "Under review"
    PUBLISHED = "published", "Published"
    PAUSED = "paused", "Paused"
    EXPIRED = "expired", "Expired"
    BLOCKED = "blocked", "Blocked"


class ListingQuerySet(models.QuerySet):
    def visible(self):
        return self.filter(is_deleted=False)

    def published(self):
        return self.visible().filter(status=ListingStatus.PUBLISHED)

    def owned_by(self, owner_id):
        return self.filter(owner_id=owner_id)

    def scoped(self, listing_id, owner_id=None):
        """Match a listing by id, and by owner when one is given.

        Owner mutations go through this single predicate so a foreign listing
        and a missing one are indistinguishable to the caller.
        """

        predicate = Q(pk=listing_id)
        if owner_id is not None:
            predicate &= Q(owner_id=owner_id, is_deleted=False)
        return self.filter(predicate)

    def with_location(self):
        return self.select_related("location", "location__province")

    def in_stable_order(self):
        return self.order_by("-created_at", "-id")


class Listing(TimestampedModel):
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="listings")
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name="listings")

    title = models.CharField(max_length=140)
    age = models.CharField(max_length=64)
    description = models.TextField(blank=True)

    price = models.DecimalField(max_digits=12, decimal_places=2)
    phone = models.CharField(max_length=32)
    use_whatsapp = models.BooleanField(default=False)
    photos = models.JSONField(default=list, blank=True)

    status = models.CharField(
        max_length=16,
        choices=ListingStatus.choices,
        default=ListingStatus.UNDER_REVIEW,
    )
    reports = models.PositiveIntegerField(default=0)
    is_deleted = models.BooleanField(default=False)
    valid_until = models.DateTimeField(null=True, blank=True)

    objects = ListingQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=["status", "is_deleted", "created_at"], name="lst_status_deleted_idx"),
            models.Index(fields=["owner", "is_deleted", "status"], name="lst_owner_deleted_idx"),
            models.Index(fields=["location", "status"], name="lst_location_status_idx"),
            models.Index(fields=["valid_until", "status"], name="lst_valid_until_idx"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return self.title
