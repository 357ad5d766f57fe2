from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from django.conf import settings

from . import codes
from .exceptions import ListingNotFound, ListingValidationError
from .models import Listing, ListingStatus, Location


EDITABLE_FIELDS = ("title", "age", "description", "location", "price", "phone", "use_whatsapp", "photos")
REQUIRED_FIELDS = ("title", "age", "location", "price", "phone", "use_whatsapp")

_TRUE = {"1", "true", "yes"}
_FALSE = {"0", "false", "no"}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raw = str(value or "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return None


def parse_price(value: Any, field: str = "price") -> Decimal:
    if isinstance(value, bool):
        raise ListingValidationError(codes.ERROR_PRICE_MUST_BE_NUMBER, field=field)
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise ListingValidationError(codes.ERROR_PRICE_MUST_BE_NUMBER, field=field)
    if not price.is_finite():
        raise ListingValidationError(codes.ERROR_PRICE_MUST_BE_NUMBER, field=field)
    if price < Decimal("0"):
        raise ListingValidationError(codes.ERROR_PRICE_NEGATIVE, field=field, message="Price cannot be negative")

    # Must fit Listing.price without rounding.
    column = Listing._meta.get_field("price")
    step = Decimal(1).scaleb(-column.decimal_places)
    if price >= Decimal(10) ** (column.max_digits - column.decimal_places):
        raise ListingValidationError(codes.ERROR_PRICE_MUST_BE_NUMBER, field=field, message="Price is too large")
    if price != price.quantize(step):
        raise ListingValidationError(
            codes.ERROR_PRICE_MUST_BE_NUMBER, field=field, message="Price has too many decimal places"
        )
    return price.quantize(step)


def parse_listing_id(value: Any) -> int:
    """Listing primary key from a path or argument value; anything else is not found."""

    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ListingNotFound()


def _clean_title(value):
    title = str(value).strip()
    if len(title) > 140:
        raise ListingValidationError(codes.ERROR_TITLE_TOO_LONG, field="title")
    return title


def _clean_phone(value):
    phone = str(value).strip()
    if not phone.isdigit():
        raise ListingValidationError(codes.ERROR_PHONE_MUST_BE_NUMBER, field="phone")
    return phone


def _clean_location(value):
    try:
        location_id = int(getattr(value, "pk", value))
    except (TypeError, ValueError):
        raise ListingValidationError(codes.ERROR_LOCATION_NOT_FOUND, field="location")
    if not Location.objects.filter(pk=location_id, is_active=True).exists():
        raise ListingValidationError(codes.ERROR_LOCATION_NOT_FOUND, field="location")
    return location_id


def _clean_photos(value):
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(p, str) and p.strip() for p in value):
        raise ListingValidationError(codes.ERROR_PHOTOS_INVALID, field="photos")
    if len(value) > settings.LISTING_MAX_PHOTOS:
        raise ListingValidationError(codes.ERROR_TOO_MANY_FILES, field="photos")
    return [p.strip() for p in value]


_REQUIRED_CODES = {
    "title": codes.ERROR_TITLE_REQUIRED,
    "age": codes.ERROR_AGE_REQUIRED,
    "location": codes.ERROR_LOCATION_REQUIRED,
    "price": codes.ERROR_PRICE_REQUIRED,
    "phone": codes.ERROR_PHONE_REQUIRED,
    "use_whatsapp": codes.ERROR_USE_WHATSAPP_BOOLEAN,
}


def clean_listing_fields(data: dict, *, partial: bool = False) -> dict:
    """Validate listing content and return model-ready values.

    With `partial`, only the supplied editable fields are checked, but a
    supplied required field still may not be blank. Unknown keys are ignored.
    The returned dict uses `location_id` instead of `location`.
    """

    data = data or {}
    cleaned: dict[str, Any] = {}

    for field in REQUIRED_FIELDS:
        if field not in data:
            if partial:
                continue
            raise ListingValidationError(_REQUIRED_CODES[field], field=field)
        if _is_blank(data[field]):
            raise ListingValidationError(_REQUIRED_CODES[field], field=field)

    if "title" in data:
        cleaned["title"] = _clean_title(data["title"])
    if "age" in data:
        cleaned["age"] = str(data["age"]).strip()[:64]
    if "description" in data:
        cleaned["description"] = str(data.get("description") or "").strip()
    if "location" in data:
        cleaned["location_id"] = _clean_location(data["location"])
    if "price" in data:
        cleaned["price"] = parse_price(data["price"])
    if "phone" in data:
        cleaned["phone"] = _clean_phone(data["phone"])
    if "use_whatsapp" in data:
        flag = parse_bool(data["use_whatsapp"])
        if flag is None:
            raise ListingValidationError(codes.ERROR_USE_WHATSAPP_BOOLEAN, field="use_whatsapp")
        cleaned["use_whatsapp"] = flag
    if "photos" in data:
        cleaned["photos"] = _clean_photos(data["photos"])

    return cleaned


def clean_status(value: Any) -> str:
    raw = str(value or "").strip()
    if raw not in ListingStatus.values:
        raise ListingValidationError(codes.ERROR_INVALID_STATUS, field="status")
    return raw
