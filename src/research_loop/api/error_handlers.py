"""
FastAPI exception handlers for structured error responses.

Every error body has the shape {"error": "<message>"}, which is what
HttpResearchBackend surfaces to loop clients.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from research_loop.api.exceptions import APIError

logger = logging.getLogger(__name__)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """
    Handle errors raised deliberately by route handlers.

    Maps to the status code carried by the exception (400, 502).
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "API error",
        extra={
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "status_code": exc.status_code,
            "error": exc.message,
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies (non-JSON, wrong field types).

    Maps to 400 Bad Request (client error).
    """
    logger.warning(
        "Invalid request format",
        extra={"path": request.url.path, "errors": exc.errors()},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Request validation failed."},
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception(
        "Unexpected error",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected error occurred."},
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    APIError: api_error_handler,
    RequestValidationError: request_validation_error_handler,
    Exception: generic_error_handler,
}
