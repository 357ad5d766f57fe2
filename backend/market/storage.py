from __future__ import annotations

import logging
import os
import secrets

from django.conf import settings
from django.core.files.storage import default_storage

from . import codes
from .exceptions import ListingValidationError

logger = logging.getLogger("clasificados.storage")

ACCEPTED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
}

UPLOAD_DIR = "listings"


def validate_uploads(files) -> None:
    if not files:
        raise ListingValidationError(codes.ERROR_NO_FILES_UPLOADED, field="photos")
    if len(files) > settings.LISTING_MAX_PHOTOS:
        raise ListingValidationError(codes.ERROR_TOO_MANY_FILES, field="photos")
    for f in files:
        if getattr(f, "content_type", None) not in ACCEPTED_CONTENT_TYPES:
            raise ListingValidationError(codes.ERROR_INVALID_FILE_TYPE, field="photos")
        if (getattr(f, "size", 0) or 0) > settings.LISTING_MAX_PHOTO_BYTES:
            raise ListingValidationError(codes.ERROR_FILE_TOO_LARGE, field="photos")


def store(files) -> list[str]:
    """Save uploaded files under random names and return their references."""

    validate_uploads(files)

    references = []
    for f in files:
        extension = os.path.splitext(getattr(f, "name", "") or "")[1].lower()
        name = f"{UPLOAD_DIR}/{secrets.token_hex(6)}{extension}"
        references.append(default_storage.save(name, f))
    return references


def delete(references) -> int:
    """Remove stored files. Errors are logged per file, never raised."""

    deleted = 0
    for ref in references or []:
        ref = str(ref or "").strip()
        # Only our own upload folder, and never a path that climbs out of it.
        if not ref.startswith(f"{UPLOAD_DIR}/") or ".." in ref:
            logger.warning("skipping foreign image reference", extra={"path": ref})
            continue
        try:
            if default_storage.exists(ref):
                default_storage.delete(ref)
                deleted += 1
        except Exception:
            logger.exception("image delete failed", extra={"path": ref})
    return deleted
