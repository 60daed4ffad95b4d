"""
Exception handlers for the storefront API.

Maps the service's exception hierarchy onto HTTP responses and catches
anything unhandled with a logged error id.
"""

import uuid

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .exceptions import (
    AuthenticationException,
    BackendRejectedException,
    BackendUnavailableException,
    CartItemNotFoundException,
    CartOwnerRequiredException,
    OrderNotFoundException,
    PermissionDeniedException,
    ProductNotFoundException,
    StorefrontException,
    ValidationException,
    WishlistItemExistsException,
)

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    ValidationException: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ProductNotFoundException: status.HTTP_404_NOT_FOUND,
    CartItemNotFoundException: status.HTTP_404_NOT_FOUND,
    OrderNotFoundException: status.HTTP_404_NOT_FOUND,
    WishlistItemExistsException: status.HTTP_409_CONFLICT,
    BackendUnavailableException: status.HTTP_503_SERVICE_UNAVAILABLE,
    BackendRejectedException: status.HTTP_400_BAD_REQUEST,
    CartOwnerRequiredException: status.HTTP_400_BAD_REQUEST,
    AuthenticationException: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedException: status.HTTP_403_FORBIDDEN,
}


def status_code_for(exc: StorefrontException) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def storefront_exception_handler(request: Request, exc: StorefrontException) -> JSONResponse:
    """Render a storefront exception as ``{"detail", "error_code", "details"}``."""
    status_code = status_code_for(exc)
    log = logger.warning if status_code >= 500 else logger.info
    log(
        "Request failed",
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        error_code=exc.error_code,
        error=exc.message,
    )

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationException) else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error_code": exc.error_code, "details": exc.details},
        headers=headers,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all handler for unexpected exceptions.

    Logs the full traceback under an error id that is returned to the
    client so reports can be matched to log lines.
    """
    error_id = uuid.uuid4().hex[:12]

    logger.error(
        "Unhandled exception",
        error_id=error_id,
        method=request.method,
        path=request.url.path,
        query_params=dict(request.query_params),
        client=request.client.host if request.client else "unknown",
        error_type=type(exc).__name__,
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error_code": "internal_error",
            "error_id": error_id,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""
    app.add_exception_handler(StorefrontException, storefront_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
