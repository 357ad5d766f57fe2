from __future__ import annotations

import logging

logger = logging.getLogger("clasificados.tasks")


def dispatch_task(task, *args, **kwargs) -> bool:
    """Queue a best-effort side effect after a primary write.

    Returns whether the task was handed to Celery. Broker or task failures are
    logged and never reach the caller.
    """

    try:
        task.delay(*args, **kwargs)
        return True
    except Exception:
        logger.exception("task dispatch failed", extra={"task": getattr(task, "name", repr(task))})
        return False
