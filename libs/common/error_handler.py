"""Map domain errors to consistent JSON error responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from libs.common.errors import (
    DomainError,
    ExternalServiceError,
    IllegalStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from libs.common.logging import get_logger

logger = get_logger(__name__)

_STATUS_BY_ERROR: dict[type[DomainError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    IllegalStateError: status.HTTP_409_CONFLICT,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ExternalServiceError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: DomainError) -> int:
    for error_cls in type(exc).__mro__:
        if error_cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_cls]
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=status_code, content={"detail": exc.message}, headers=headers
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register the domain error handlers on ``app``."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
