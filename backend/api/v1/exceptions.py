from __future__ import annotations

from typing import Any

from rest_framework import exceptions as drf_exceptions
from rest_framework.views import exception_handler as drf_exception_handler

from market.exceptions import (
    AccessDenied,
    ListingError,
    ListingNotFound,
    ListingValidationError,
)


class ServiceError(drf_exceptions.APIException):
    status_code = 500
    default_detail = "An unexpected error occurred. Please try again later."
    default_code = "error"


def _to_drf(exc: ListingError) -> drf_exceptions.APIException:
    if isinstance(exc, ListingValidationError):
        detail = {exc.field or "non_field_errors": [exc.message]}
        return drf_exceptions.ValidationError(detail, code=exc.code)
    if isinstance(exc, ListingNotFound):
        return drf_exceptions.NotFound(exc.message, code=exc.code)
    if isinstance(exc, AccessDenied):
        if not exc.authenticated:
            return drf_exceptions.NotAuthenticated(code=exc.code)
        return drf_exceptions.PermissionDenied(exc.message, code=exc.code)
    return ServiceError(code=exc.code)


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    """DRF exception handler that understands listing domain errors.

    Domain errors become the matching DRF exception, so responses keep DRF's
    default shapes, plus:
    - `error: {code, message}` with the stable domain code when there is one.
    - `request_id` from the request middleware.
    """

    domain_code = None
    if isinstance(exc, ListingError):
        domain_code = exc.code
        message = exc.message
        exc = _to_drf(exc)
        # APIView only negotiates the auth challenge for exceptions it raised itself.
        if isinstance(exc, drf_exceptions.NotAuthenticated):
            view = context.get("view")
            auth_header = view.get_authenticate_header(context["request"]) if view is not None else None
            if auth_header:
                exc.auth_header = auth_header
            else:
                exc.status_code = 403
    else:
        message = None

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    request = context.get("request")
    request_id = getattr(request, "request_id", None)

    data = response.data
    if not isinstance(data, dict):
        data = {"detail": data}
        response.data = data

    if request_id and "request_id" not in data:
        data["request_id"] = request_id

    if "error" not in data:
        if message is None:
            message = str(data.get("detail") or exc.default_detail)
        data["error"] = {
            "code": domain_code or str(getattr(exc, "default_code", "error")),
            "message": str(message),
        }

    return response
