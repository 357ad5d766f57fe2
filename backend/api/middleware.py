import logging
import time
import uuid


logger = logging.getLogger("clasificados.request")


def _get_client_ip(request) -> str | None:
    # First hop of X-Forwarded-For when behind a proxy; used for logging only.
    xff = request.META.get("HTTP_X_FORWARDED_FOR")
    if xff:
        ip = str(xff).split(",")[0].strip()
        return ip or None
    ip = request.META.get("REMOTE_ADDR")
    return str(ip).strip() if ip else None


def _principal_fields(request) -> tuple[int | None, str | None]:
    # DRF authenticates inside the view, so the JWT user is only visible here
    # once the view stored it back on the Django request.
    user = getattr(request, "user", None)
    if user is None or not getattr(user, "is_authenticated", False):
        return None, None
    return user.id, getattr(user, "role", None)


class RequestIdAndLoggingMiddleware:
    """Attach a request id to each request and log API requests.

    - Accepts an incoming X-Request-ID if provided.
    - Always emits X-Request-ID in the response.
    - Logs /api/ requests with request_id, user_id, role, status_code, duration_ms.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        start = time.perf_counter()

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.request_id = request_id

        response = self.get_response(request)
        is_api = request.path.startswith("/api/")

        duration_ms = (time.perf_counter() - start) * 1000.0
        response["X-Request-ID"] = request_id

        if is_api:
            user_id, role = _principal_fields(request)
            logger.info(
                "request",
                extra={
                    "request_id": request_id,
                    "user_id": user_id,
                    "role": role,
                    "client_ip": _get_client_ip(request),
                    "method": request.method,
                    "path": request.path,
                    "status_code": getattr(response, "status_code", None),
                    "duration_ms": round(duration_ms, 2),
                },
            )

        return response
