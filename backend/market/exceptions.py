from __future__ import annotations

import functools
import logging

from django.db import DatabaseError

from . import codes

logger = logging.getLogger("clasificados.listings")


class ListingError(Exception):
    code = codes.ERROR_GENERIC
    message = "Listing operation failed."

    def __init__(self, code: str | None = None, message: str | None = None):
        if code:
            self.code = code
        if message:
            self.message = message
        super().__init__(self.message)


class ListingValidationError(ListingError):
    message = "Invalid listing data."

    def __init__(self, code: str, field: str | None = None, message: str | None = None):
        super().__init__(code=code, message=message)
        self.field = field


class ListingNotFound(ListingError):
    code = codes.ERROR_LISTING_NOT_FOUND
    message = "Listing not found."


class AccessDenied(ListingError):
    code = codes.ERROR_ACCESS_DENIED
    message = "You do not have permission to perform this action."

    def __init__(self, *, authenticated: bool = True):
        super().__init__(code=None if authenticated else codes.ERROR_UNAUTHORIZED)
        self.authenticated = authenticated


class PersistenceError(ListingError):
    code = codes.ERROR_GENERIC
    message = "An unexpected error occurred. Please try again later."


def translate_persistence_errors(func):
    """Re-raise database failures as PersistenceError, keeping domain errors intact."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception("persistence failure", extra={"operation": func.__name__})
            raise PersistenceError() from exc

    return wrapper
