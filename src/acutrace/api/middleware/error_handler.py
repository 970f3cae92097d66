"""Global error handling.

All exceptions are converted to one JSON error shape (error_code, message,
user_message, suggestion, retry_allowed) with an appropriate status code.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from acutrace.config import settings
from acutrace.core.errors import get_error
from acutrace.core.exceptions import AnalyticsError

logger = logging.getLogger(__name__)


def _error_content(error_code: str, message: str | None = None) -> dict:
    error_info = get_error(error_code)
    return {
        "error_code": error_code,
        "message": message or error_info["message"],
        "user_message": error_info["user_message"],
        "suggestion": error_info["suggestion"],
        "retry_allowed": error_info["retry_allowed"],
    }


async def handle_analytics_error(request: Request, exc: AnalyticsError) -> JSONResponse:
    """Handle custom analytics exceptions.

    Args:
        request: The incoming request
        exc: The analytics exception

    Returns:
        JSONResponse with error details from the catalog
    """
    # Details can echo payload content; only log them in debug.
    extra = {"error_code": exc.error_code, "path": request.url.path, "method": request.method}
    if settings.debug:
        extra["details"] = exc.details

    logger.error(f"Analytics error: {exc.error_code}", extra=extra)

    return JSONResponse(status_code=exc.http_status, content=_error_content(exc.error_code))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body validation errors.

    Args:
        request: The incoming request
        exc: The validation error

    Returns:
        JSONResponse listing the failing fields
    """
    error_messages = []
    for error in exc.errors():
        field = ".".join(str(x) for x in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        error_messages.append(f"{field}: {msg}")

    logger.warning(
        f"Validation error on {request.url.path}",
        extra={"path": request.url.path, "method": request.method, "error_code": "VAL_001"},
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_content("VAL_001", " | ".join(error_messages)),
    )


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internals.

    Args:
        request: The incoming request
        exc: The unexpected exception

    Returns:
        JSONResponse with a generic error message
    """
    extra = {
        "error_type": type(exc).__name__,
        "path": request.url.path,
        "method": request.method,
    }
    # In non-debug: do not log the traceback (may include transaction data).
    if settings.debug:
        logger.exception(f"Unexpected error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Unexpected error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content("SYS_001"),
    )
