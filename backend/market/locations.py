"""Read-only lookups over the province/city catalog."""

from __future__ import annotations

from django.db.models import Q

from .models import Location, Province


def resolve_by_text(text: str | None) -> list[int]:
    """Ids of active locations whose city or province name contains `text`.

    Blank text matches every active location.
    """

    qs = Location.objects.filter(is_active=True)
    term = (text or "").strip()
    if term:
        qs = qs.filter(Q(name__icontains=term) | Q(province__name__icontains=term))
    return list(qs.order_by("id").values_list("id", flat=True))


def list_provinces(country_code: str = "AR"):
    return Province.objects.filter(country_code=country_code, is_active=True).order_by("name")


def list_cities_by_province(code: str, country_code: str = "AR"):
    return (
        Location.objects.select_related("province")
        .filter(province__code=code, province__country_code=country_code, is_active=True)
        .order_by("name")
    )
