from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    USER = "user", "User"
    ADMIN = "admin", "Admin"
    MODERATOR = "moderator", "Moderator"
    GUEST = "guest", "Guest"


class User(AbstractUser):
    """Account record owned by the identity provider integration.

    The listing core only reads `id` and `role`.
    """

    role = models.CharField(max_length=16, choices=Role.choices, default=Role.USER, db_index=True)
    profile_name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=32, blank=True)

    def __str__(self) -> str:
        return self.profile_name or self.username
