# canteen/core/errors.py
import logging
from enum import Enum
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)


class CanteenError(Exception):
    """Base error rendered as ``{"message": ...}`` with its own status code."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CanteenError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(CanteenError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(CanteenError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(CanteenError):
    status_code = 404
    default_message = "Not found"


class ItemUnavailable(ValidationError):
    default_message = "Item unavailable"


class InternalError(CanteenError):
    status_code = 500


def _text(value) -> str:
    # fastapi-users error codes are str enums; send the bare code
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _message(detail) -> str:
    # fastapi-users sends codes like "LOGIN_BAD_CREDENTIALS" or {"code": ..., "reason": ...}
    if isinstance(detail, dict):
        return _text(detail.get("reason") or detail.get("code") or detail)
    return _text(detail)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(loc)
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


async def canteen_error_handler(request: Request, exc: CanteenError):
    if exc.status_code >= 500:
        log.error("❌ %s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": _message(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": _validation_message(exc)})


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    log.exception("❌ Database failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CanteenError, canteen_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
