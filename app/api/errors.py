"""
Centralized translation of errors into the standard JSON envelope
"""

import logging
import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.errors import AppError
from app.utils.responses import error_response

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went wrong"


def _request_context(request: Request) -> str:
    user = getattr(request.state, "user", None)
    return "request_id=%s user_id=%s" % (
        request.headers.get("X-Request-ID", "unknown"),
        user.id if user else "unauthenticated",
    )


def _stack(exc: Exception) -> Optional[str]:
    if not settings.is_development:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(
            "%s %s - %s [%s query=%s]",
            request.method, request.url.path, exc.message, _request_context(request),
            dict(request.query_params), exc_info=exc,
        )
    else:
        logger.warning(
            "%s %s - %s [status=%d %s]",
            request.method, request.url.path, exc.message, exc.status_code, _request_context(request),
        )

    message = exc.message
    if not exc.operational and settings.is_production:
        message = GENERIC_MESSAGE
    return error_response(
        message=message,
        status_code=exc.status_code,
        errors=exc.details,
        stack=None if exc.operational else _stack(exc),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    logger.warning(
        "%s %s - invalid request data [status=400 %s]",
        request.method, request.url.path, _request_context(request),
    )
    return error_response(message="Invalid request data", status_code=400, errors=errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Cannot find {request.url.path} on this server"
    else:
        message = str(exc.detail)
    logger.warning(
        "%s %s - %s [status=%d %s]",
        request.method, request.url.path, message, exc.status_code, _request_context(request),
    )
    return error_response(message=message, status_code=exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(
        "%s %s - unhandled error [%s]", request.method, request.url.path, _request_context(request)
    )
    errors = None if settings.is_production else str(exc)
    return error_response(message=GENERIC_MESSAGE, status_code=500, errors=errors, stack=_stack(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
