from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.db.models import Count, Q

from . import codes
from .exceptions import ListingNotFound, ListingValidationError, translate_persistence_errors
from .locations import resolve_by_text
from .models import Listing, ListingStatus
from .policy import Operation, Principal, policy
from .validation import parse_listing_id


class SearchScope(str, enum.Enum):
    PUBLIC = "public"
    OWNER = "owner"
    ADMIN = "admin"


_SCOPE_OPERATIONS = {
    SearchScope.PUBLIC: Operation.PUBLIC_SEARCH,
    SearchScope.OWNER: Operation.LIST_MINE,
    SearchScope.ADMIN: Operation.ADMIN_SEARCH,
}


@dataclass
class SearchFilters:
    location: str | None = None
    query: str | None = None
    status: str | None = None
    province: str | None = None
    user_id: int | None = None
    only_whatsapp: bool = False
    age: str | None = None
    price: Decimal | None = None
    price_min: Decimal | None = None
    price_max: Decimal | None = None
    include_deleted: bool = False


@dataclass
class SearchPage:
    items: list = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        if self.total <= 0:
            return 0
        return math.ceil(self.total / self.limit)


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def parse_page_params(page: Any = None, limit: Any = None) -> tuple[int, int]:
    """1-based page and a bounded positive limit; junk falls back to defaults."""

    page_num = _positive_int(page, 1)
    size = _positive_int(limit, settings.LISTINGS_DEFAULT_PAGE_SIZE)
    return page_num, min(size, settings.LISTINGS_MAX_PAGE_SIZE)


def compile_filter(scope: SearchScope, filters: SearchFilters, *, owner_id: int | None = None) -> Q:
    if scope == SearchScope.PUBLIC:
        q = Q(status=ListingStatus.PUBLISHED, is_deleted=False)
    elif scope == SearchScope.OWNER:
        if owner_id is None:
            raise ValueError("owner scope requires owner_id")
        q = Q(owner_id=owner_id, is_deleted=False)
    else:
        q = Q() if filters.include_deleted else Q(is_deleted=False)

    if scope != SearchScope.PUBLIC and filters.status:
        if filters.status not in ListingStatus.values:
            raise ListingValidationError(codes.ERROR_INVALID_STATUS, field="status")
        q &= Q(status=filters.status)

    if scope == SearchScope.ADMIN and filters.user_id is not None:
        q &= Q(owner_id=filters.user_id)

    if filters.location and filters.location.strip():
        q &= Q(location_id__in=resolve_by_text(filters.location))

    if filters.province:
        q &= Q(location__province__code=filters.province)

    if filters.only_whatsapp:
        q &= Q(use_whatsapp=True)

    if filters.age:
        q &= Q(age=filters.age)

    if filters.price is not None:
        q &= Q(price=filters.price)
    if filters.price_min is not None:
        q &= Q(price__gte=filters.price_min)
    if filters.price_max is not None:
        q &= Q(price__lte=filters.price_max)

    term = (filters.query or "").strip()
    if term:
        q &= Q(title__icontains=term) | Q(description__icontains=term)

    return q


def paginate(qs, page: int, limit: int) -> SearchPage:
    total = qs.count()
    offset = (page - 1) * limit
    items = list(qs[offset : offset + limit])
    return SearchPage(items=items, total=total, page=page, limit=limit)


@translate_persistence_errors
def search_listings(
    principal: Principal | None,
    scope: SearchScope,
    filters: SearchFilters | None = None,
    *,
    page: Any = None,
    limit: Any = None,
) -> SearchPage:
    policy.authorize(principal, _SCOPE_OPERATIONS[scope])

    filters = filters or SearchFilters()
    owner_id = principal.id if scope == SearchScope.OWNER else None
    q = compile_filter(scope, filters, owner_id=owner_id)
    page_num, size = parse_page_params(page, limit)

    qs = Listing.objects.with_location().filter(q).in_stable_order()
    return paginate(qs, page_num, size)


@translate_persistence_errors
def fetch_listing(principal: Principal | None, listing_id) -> Listing:
    """Public fetch-by-id.

    Published, non-deleted listings are visible to anyone; owners also see
    their own non-deleted listings in any status; admins and moderators see
    everything.
    """

    policy.authorize(principal, Operation.FETCH)

    qs = Listing.objects.with_location()
    if principal is None or not principal.is_privileged:
        visible = Q(status=ListingStatus.PUBLISHED)
        if principal is not None:
            visible |= Q(owner_id=principal.id)
        qs = qs.filter(visible, is_deleted=False)

    listing = qs.filter(pk=parse_listing_id(listing_id)).first()
    if listing is None:
        raise ListingNotFound()
    return listing


@translate_persistence_errors
def listing_stats(principal: Principal | None) -> dict:
    policy.authorize(principal, Operation.STATS)

    live = Listing.objects.visible()
    by_status = {value: 0 for value in ListingStatus.values}
    for row in live.order_by().values("status").annotate(count=Count("id")):
        by_status[row["status"]] = row["count"]

    return {
        "total": live.count(),
        "by_status": by_status,
        "reported": live.filter(reports__gt=0).count(),
        "deleted": Listing.objects.filter(is_deleted=True).count(),
    }
