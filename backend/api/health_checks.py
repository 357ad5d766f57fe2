from __future__ import annotations

import os

from dataclasses import dataclass

from django.core.files.storage import default_storage
from django.db import DatabaseError, connections
from django.utils import timezone


def _env_truthy(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return str(raw).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class HealthStatus:
    ok: bool
    payload: dict


def _check_db() -> HealthStatus:
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        return HealthStatus(ok=True, payload={"ok": True})
    except DatabaseError as exc:
        return HealthStatus(ok=False, payload={"ok": False, "error": str(exc)})


def _check_storage() -> HealthStatus:
    # Remote backends may need credentials or a round trip, so this stays opt-in.
    backend = f"{default_storage.__class__.__module__}.{default_storage.__class__.__name__}"
    try:
        default_storage.exists("listings/.health")
        return HealthStatus(ok=True, payload={"ok": True, "backend": backend})
    except OSError as exc:
        return HealthStatus(ok=False, payload={"ok": False, "backend": backend, "error": str(exc)})


def _check_expiry() -> HealthStatus:
    """Count listings past valid_until that the daily sweep has not expired yet."""

    from market.models import Listing, ListingStatus

    try:
        overdue = (
            Listing.objects.filter(valid_until__lt=timezone.now())
            .exclude(status=ListingStatus.EXPIRED)
            .count()
        )
    except DatabaseError as exc:
        return HealthStatus(ok=False, payload={"ok": False, "error": str(exc)})
    # Overdue rows are expected between sweeps; they do not degrade health.
    return HealthStatus(ok=True, payload={"ok": True, "overdue": overdue})


def build_health_payload() -> tuple[dict, bool]:
    """Return (payload, overall_ok)."""

    db = _check_db()

    payload: dict = {"db": db.payload}
    overall_ok = db.ok

    if _env_truthy("HEALTH_CHECK_STORAGE", default=False):
        storage = _check_storage()
        payload["storage"] = storage.payload
        overall_ok = overall_ok and storage.ok
    else:
        payload["storage"] = {"skipped": True}

    if db.ok and _env_truthy("HEALTH_CHECK_EXPIRY", default=False):
        expiry = _check_expiry()
        payload["expiry"] = expiry.payload
        overall_ok = overall_ok and expiry.ok
    else:
        payload["expiry"] = {"skipped": True}

    payload["status"] = "ok" if overall_ok else "degraded"

    return payload, overall_ok
