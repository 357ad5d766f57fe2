import json
import logging
from datetime import datetime, timezone


class JsonFormatter(logging.Formatter):
    """Single-line JSON records for request, lifecycle and task logs."""

    extra_keys = (
        "request_id",
        "user_id",
        "role",
        "method",
        "path",
        "client_ip",
        "status_code",
        "duration_ms",
        "listing_id",
        "operation",
        "from_status",
        "to_status",
        "reports",
        "task",
        "count",
    )

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in self.extra_keys:
            if hasattr(record, key):
                payload[key] = getattr(record, key)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)
