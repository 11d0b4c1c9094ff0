"""
Application error taxonomy.

Every failure a handler can produce maps to exactly one ErrorKind. Routers
raise the AppError subclasses; the handlers registered in main.py render them
as JSON bodies of the form {"error": ...}.
"""

import logging
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    UNEXPECTED = "unexpected"


class AppError(Exception):
    """Base class for errors rendered by the API"""

    kind: ErrorKind = ErrorKind.UNEXPECTED
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message}


class Unauthorized(AppError):
    kind = ErrorKind.UNAUTHORIZED
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AppError):
    kind = ErrorKind.FORBIDDEN
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Not found"


class ValidationFailed(AppError):
    """Schema mismatch; carries one {"path", "message"} entry per failure"""

    kind = ErrorKind.VALIDATION_FAILED
    status_code = 400
    default_message = "Invalid request body"

    def __init__(self, details: list[dict], message: Optional[str] = None, **context: Any):
        super().__init__(message, **context)
        self.details = details

    def field_errors(self) -> dict[str, str]:
        """First message per top-level field, for showing next to form inputs"""
        fields: dict[str, str] = {}
        for detail in self.details:
            path = detail.get("path") or []
            if path:
                fields.setdefault(str(path[0]), detail["message"])
        return fields

    def to_body(self) -> dict:
        return {"error": self.message, "details": self.details, "fields": self.field_errors()}


class Unexpected(AppError):
    kind = ErrorKind.UNEXPECTED
    status_code = 500


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.kind is ErrorKind.UNEXPECTED:
        logger.error(f"{request.method} {request.url.path} - Unexpected error: {exc.context}")
    else:
        logger.info(f"{request.method} {request.url.path} - {exc.kind.value}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Render FastAPI's own body/parameter validation failures in the same
    400 {"error", "details"} shape as the validation layer.
    """
    details = []
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if part != "body"]
        details.append({"path": loc, "message": error.get("msg", "Invalid value")})

    logger.warning(f"Validation error for {request.url.path}: {details}")
    return JSONResponse(
        status_code=400,
        content=ValidationFailed(details).to_body(),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework and rate-limit HTTP errors, in the same {"error": ...} shape"""
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
