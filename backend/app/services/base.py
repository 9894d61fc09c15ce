# backend/app/services/base.py
"""
Base Service Pattern for the counseling platform.

Provides common functionality for all service classes including:
- Logging
- Performance monitoring (@measure_operation, Prometheus)
- Caller authorization helpers
"""

from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Optional, TypeVar, cast

from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenException, UnauthorizedException
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Caller

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """
    Base class for all service layer components.

    Provides common patterns for:
    - Database session ownership
    - Logging
    - Performance monitoring
    - Owner-or-admin checks
    """

    # Class-level metrics storage
    _class_metrics: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def __init__(self, db: Optional[Session] = None):
        """
        Initialize base service.

        Args:
            db: Database session (collaborator services without storage pass None)
        """
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("create_booking")
            def create_booking(self, data):
                # Method implementation

        Args:
            operation_name: Name of the operation for metrics

        Returns:
            Decorator function
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self, *args, **kwargs):
                start_time = time.time()
                success = False
                error_type = None

                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.time() - start_time
                    if hasattr(self, "_record_metric"):
                        self._record_metric(operation_name, elapsed, success)

                    if elapsed > SLOW_OPERATION_SECONDS and hasattr(self, "logger"):
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )

                    try:
                        prometheus_metrics.record_service_operation(
                            service=self.__class__.__name__,
                            operation=operation_name,
                            duration=elapsed,
                            status="success" if success else "error",
                            error_type=error_type,
                        )
                    except Exception as metrics_error:
                        # Metrics collection must not break the operation
                        logger.debug(f"Metrics recording failed: {metrics_error}")

            wrapper._operation_name = operation_name  # type: ignore[attr-defined]
            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context):
        """
        Log an operation with context.

        Args:
            operation: Operation name
            **context: Additional context to log
        """
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})

    # Authorization helpers

    @staticmethod
    def require_caller(caller: Optional[Caller]) -> Caller:
        if caller is None:
            raise UnauthorizedException("Authentication required")
        return caller

    def ensure_owner_or_admin(
        self, caller: Optional[Caller], owner_id: Optional[str], resource: str
    ) -> Caller:
        """
        Allow the owning user or an admin.

        Raises:
            UnauthorizedException: No caller
            ForbiddenException: Caller is neither the owner nor an admin
        """
        current = self.require_caller(caller)
        if current.is_admin or (owner_id is not None and current.id == owner_id):
            return current
        self.logger.info(f"User {current.id} denied access to {resource}")
        raise ForbiddenException(f"You do not have permission to modify this {resource}")

    def _record_metric(self, operation: str, elapsed: float, success: bool) -> None:
        """
        Record in-process performance metrics.

        Args:
            operation: Operation name
            elapsed: Time taken in seconds
            success: Whether operation succeeded
        """
        metrics = BaseService._class_metrics.setdefault(self.__class__.__name__, {})
        metric_data = metrics.setdefault(
            operation,
            {
                "count": 0,
                "total_time": 0.0,
                "success_count": 0,
                "failure_count": 0,
                "min_time": float("inf"),
                "max_time": 0.0,
            },
        )
        metric_data["count"] += 1
        metric_data["total_time"] += elapsed
        metric_data["min_time"] = min(metric_data["min_time"], elapsed)
        metric_data["max_time"] = max(metric_data["max_time"], elapsed)
        if success:
            metric_data["success_count"] += 1
        else:
            metric_data["failure_count"] += 1

    def get_metrics(self) -> Dict[str, Dict[str, Any]]:
        """Per-operation timing summary for this service class."""
        summary = {}
        for operation, data in BaseService._class_metrics.get(self.__class__.__name__, {}).items():
            count = data["count"]
            summary[operation] = {
                **data,
                "avg_time": data["total_time"] / count if count else 0.0,
                "success_rate": data["success_count"] / count if count else 0.0,
            }
        return summary
