"""
Service error handling for API endpoints.

Maps the IvyException hierarchy onto HTTP status codes so every router
reports failures the same way.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from ivy.core.exceptions import (
    ConfigurationError,
    IndexingError,
    IvyException,
    ReindexInProgressError,
    SessionStorageError,
    UpstreamError,
    ValidationError,
)
from ivy.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def to_http_exception(error: IvyException) -> HTTPException:
    """
    Translate a service exception into an HTTPException.

    Args:
        error: Raised service exception

    Returns:
        HTTPException: Exception with status code and client-safe detail
    """
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
    if isinstance(error, ConfigurationError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Service is not configured",
        )
    if isinstance(error, UpstreamError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The assistant is unavailable, please try again",
        )
    if isinstance(error, SessionStorageError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session is busy, please try again",
        )
    if isinstance(error, ReindexInProgressError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)
    if isinstance(error, IndexingError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Re-index failed",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal error",
    )


def handle_service_errors(func: F) -> F:
    """
    Decorator turning IvyException into HTTPException with logging.

    HTTPException raised by the endpoint itself passes through untouched.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except IvyException as e:
            http_error = to_http_exception(e)
            log_with_context(
                logger,
                logging.ERROR if http_error.status_code >= 500 else logging.WARNING,
                f"{__name__}:{func.__name__} - {type(e).__name__}: {e.message}",
                error_type=type(e).__name__,
                details=e.details,
            )
            raise http_error from e

    return wrapper  # type: ignore[return-value]
