# tutorsearch/core/exceptions.py
"""
Domain-specific exceptions for the search service.

These exceptions carry a client-facing message and a stable code, and
know how to turn themselves into an HTTPException at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when a request is missing something the operation cannot do without."""

    status_code = status.HTTP_400_BAD_REQUEST


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


class SearchTimeoutException(ServiceException):
    """Raised when a search request exceeds its time budget."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT

    def __init__(self, operation: str, timeout_s: float) -> None:
        super().__init__(
            message="Search took too long to complete. Please try again.",
            code="SEARCH_TIMEOUT",
            details={"operation": operation, "timeout_s": timeout_s},
        )


class OperationCancelledException(ServiceException):
    """Raised in a worker whose request was already abandoned, before it issues more queries."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT

    def __init__(self, operation: str) -> None:
        super().__init__(
            message="Search was cancelled.",
            code="SEARCH_CANCELLED",
            details={"operation": operation},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as database connection
    issues or query failures.
    """


class UpstreamQueryException(RepositoryException):
    """The spatial index query itself failed (storage unavailable or a malformed query)."""

    code = "UPSTREAM_QUERY_ERROR"
