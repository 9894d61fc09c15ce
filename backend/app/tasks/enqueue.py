"""
Centralized task enqueue helper.

Always use enqueue_task() instead of task.delay() so routing and logging
stay in one place. Tasks are sent by name, so the API process does not
need to import the task modules.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


def enqueue_task(
    task_name: str,
    args: Optional[Tuple[Any, ...]] = None,
    kwargs: Optional[Dict[str, Any]] = None,
    **options: Any,
) -> Any:
    """
    Enqueue a Celery task by name.

    Args:
        task_name: Fully qualified task name (e.g., "app.tasks.notification_tasks.deliver_booking_notification")
        args: Positional arguments for the task
        kwargs: Keyword arguments for the task
        **options: Additional Celery send options (queue, countdown, eta, etc.)

    Returns:
        AsyncResult from Celery
    """
    from app.tasks.celery_app import celery_app

    result = celery_app.send_task(task_name, args=args or (), kwargs=kwargs or {}, **options)
    logger.debug(f"Enqueued {task_name} as {result.id}")
    return result
