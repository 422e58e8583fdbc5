# app/core/handlers.py
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.exceptions import BaseAPIException
from app.core.logging import logger


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    """Build the error envelope shared by every handler."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "status": status_code,
                "code": code,
                "reason": _reason(status_code),
                "message": message,
                "path": request.url.path,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "details": details if details is not None else [],
            }
        },
    )


# 1. Custom domain errors raised by the services
async def custom_api_exception_handler(request: Request, exc: BaseAPIException):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        return error_response(request, exc.status_code, exc.code,
                              "An unexpected error occurred. Please contact support.")
    return error_response(request, exc.status_code, exc.code, exc.message, exc.details)


# 2. Validation errors raised by Pydantic for bad bodies and query params
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        # e.g. "email" instead of "body.email"
        field = ".".join(str(x) for x in error["loc"] if x not in ("body", "query", "path"))
        details.append(f"{field}: {error['msg']}")

    return error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Validation failed",
        details,
    )


# 3. Standard HTTP errors (unknown URL, wrong method, ...)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))


# 4. Anything else: bug, driver failure, database unavailable
async def general_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled Exception: {exc}", exc_info=True)

    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred. Please contact support.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, custom_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
