"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and
infrastructure exceptions to HTTP responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import DebtCaseException
from app.infrastructure.exceptions import (
    DocumentRelocationError,
    StorageException,
    StorageNotFoundError,
    StoragePermissionError,
)

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "VALIDATION_ERROR": 400,
    "UPLOAD_REJECTED": 400,
    "SPREADSHEET_FORMAT_ERROR": 400,
    "CASE_STATUS_UNCHANGED": 409,
    "SQL_NOT_CONFIGURED": 500,
}


def _debt_case_exception_handler(
    request: Request, exc: DebtCaseException
) -> JSONResponse:
    """Return JSON from DebtCaseException.to_dict() with appropriate status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if exc.error_code == "UPLOAD_REJECTED" and exc.details.get("reason") == "too_large":
        status = 413
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _storage_exception_handler(request: Request, exc: StorageException) -> JSONResponse:
    """Map storage failures to 404/403/500 without leaking filesystem paths."""
    if isinstance(exc, StorageNotFoundError):
        return JSONResponse(
            status_code=404,
            content={"error": "FILE_NOT_FOUND", "message": "File not found on storage"},
        )
    if isinstance(exc, StoragePermissionError):
        return JSONResponse(
            status_code=403,
            content={"error": "STORAGE_FORBIDDEN", "message": "Access to this path is not allowed"},
        )
    logger.error("Storage failure (%s): %s", exc.__class__.__name__, exc)
    content: dict[str, Any] = {"error": "STORAGE_ERROR", "message": "Storage operation failed"}
    if isinstance(exc, DocumentRelocationError):
        content["details"] = {"stage": exc.stage}
    return JSONResponse(status_code=500, content=content)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: DebtCaseException (and
    subclasses), StorageException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(DebtCaseException, _debt_case_exception_handler)
    app.add_exception_handler(StorageException, _storage_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
