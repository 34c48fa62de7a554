# tutorsearch/errors.py
"""
Exception handlers.

Every error response uses the same envelope the web client already reads:

    {"success": false, "message": ..., "code": ..., "status": ..., "detail": ...}

``detail`` carries structured details for domain errors, and the exception
text for unexpected failures outside production.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.exceptions import DomainException, RepositoryException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Search failed. Please try again later."


def _title_from_status(status_code: int) -> str:
    mapping = {
        400: "Bad Request",
        404: "Not Found",
        405: "Method Not Allowed",
        422: "Unprocessable Entity",
        500: "Internal Server Error",
        504: "Gateway Timeout",
    }
    return mapping.get(status_code, "Error")


def _envelope(
    *,
    status: int,
    message: Optional[str] = None,
    code: Optional[str] = None,
    detail: Optional[Any] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "success": False,
        "message": message or _title_from_status(status),
        "code": code or _title_from_status(status).lower().replace(" ", "_"),
        "status": status,
    }
    if detail is not None:
        body["detail"] = jsonable_encoder(detail)
    return body


def _parse_detail(detail: Any) -> tuple[Optional[str], Optional[str], Optional[Any]]:
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        message = detail.get("message") or detail.get("detail")
        message_text = message if isinstance(message, str) else None
        extra = detail.get("details") or detail.get("errors") or None
        return message_text, code, extra
    if isinstance(detail, str):
        return detail, None, None
    if detail is None:
        return None, None, None
    return str(detail), None, None


def _http_response(exc: StarletteHTTPException) -> JSONResponse:
    message, code, extra = _parse_detail(exc.detail)
    return JSONResponse(
        _envelope(status=exc.status_code, message=message, code=code, detail=extra),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


def _server_error(exc: Exception) -> JSONResponse:
    detail = None if settings.is_production else str(exc)
    return JSONResponse(
        _envelope(
            status=500,
            message=GENERIC_ERROR_MESSAGE,
            code=getattr(exc, "code", None) or "internal_server_error",
            detail=detail,
        ),
        status_code=500,
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s on %s: %s", exc.code, request.url.path, exc.message)
        return _http_response(exc.to_http_exception())

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _http_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _http_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            _envelope(
                status=422,
                message="Request validation failed",
                code="validation_error",
                detail=exc.errors(),
            ),
            status_code=422,
        )

    @app.exception_handler(RepositoryException)
    async def repository_exception_handler(
        request: Request, exc: RepositoryException
    ) -> JSONResponse:
        logger.error("Upstream query failed on %s: %s", request.url.path, exc)
        return _server_error(exc)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return _server_error(exc)
