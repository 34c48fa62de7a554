# tutorsearch/services/base.py
"""
Base Service Pattern for the search service.

Provides common functionality for service classes:
- Database session handle
- Logging
- Performance monitoring (Prometheus)

Search is read-only, so there is no transaction management here.
"""

from contextlib import contextmanager
from functools import wraps
import logging
import threading
import time
from typing import Any, Callable, Iterator, TypeVar, cast

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import OperationCancelledException
from ..database.session_utils import apply_statement_timeout
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """
    Base class for all service layer components.

    Provides common patterns for:
    - Database session management
    - Logging
    - Performance monitoring
    """

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Stop issuing queries; called when the request that owns this service gives up."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def _raise_if_cancelled(self, operation_name: str) -> None:
        if self._cancelled.is_set():
            self.logger.info("Skipping %s: request already abandoned", operation_name)
            raise OperationCancelledException(operation_name)

    def bound_query_time(self) -> None:
        """Let the database cancel any statement that outlives the request budget."""
        apply_statement_timeout(self.db, settings.search_request_timeout_s)

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("search_teachers")
            def search_teachers(self, params):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                self._raise_if_cancelled(operation_name)
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
                    self._finish_measurement(operation_name, elapsed, success, error_type)

            return cast(F, wrapper)

        return decorator

    @contextmanager
    def measure_operation_context(self, operation_name: str) -> Iterator[None]:
        """
        Context manager to measure part of an operation.

        Usage:
            with self.measure_operation_context("count_matches"):
                total = self.repository.count(...)
        """
        self._raise_if_cancelled(operation_name)
        start_time = time.time()
        success = False
        error_type = None
        try:
            yield
            success = True
        except Exception as e:
            error_type = type(e).__name__
            raise
        finally:
            self._finish_measurement(operation_name, time.time() - start_time, success, error_type)

    def _finish_measurement(
        self, operation_name: str, elapsed: float, success: bool, error_type: str | None
    ) -> None:
        if elapsed > SLOW_OPERATION_SECONDS:
            self.logger.warning(
                "Slow operation detected: %s took %.2fs", operation_name, elapsed
            )

        prometheus_metrics.record_service_operation(
            service=self.__class__.__name__,
            operation=operation_name,
            duration=elapsed,
            status="success" if success else "error",
            error_type=error_type,
        )

    def log_operation(self, operation: str, **context: Any) -> None:
        """Log an operation with structured context."""
        self.logger.info("Operation: %s", operation, extra={"operation": operation, **context})
