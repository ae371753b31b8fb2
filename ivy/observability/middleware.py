"""
Request middleware for the Ivy API.

CorrelationMiddleware binds a correlation ID for the lifetime of a
request and echoes it back. RequestLoggingMiddleware writes one line per
finished request with its status and latency, and notes whether the
caller presented a session cookie (never its value).

Dependencies: fastapi, starlette, ivy.observability.correlation
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ivy.observability.correlation import (
    CORRELATION_HEADER,
    clear_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

SESSION_COOKIE = "ivy_session"
RESPONSE_TIME_HEADER = "X-Response-Time-Ms"

# Polled by load balancers; logged at DEBUG to keep INFO readable
_QUIET_PATHS = ("/health",)

__all__ = ["CORRELATION_HEADER", "CorrelationMiddleware", "RequestLoggingMiddleware"]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once it completes, or the exception that ended it."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"
        has_session = SESSION_COOKIE in request.cookies

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{__name__}:dispatch - {route} raised {type(e).__name__}",
                extra={"elapsed_ms": _elapsed_ms(started), "has_session": has_session},
            )
            raise

        elapsed = _elapsed_ms(started)
        response.headers[RESPONSE_TIME_HEADER] = str(elapsed)
        level = logging.DEBUG if request.url.path.startswith(_QUIET_PATHS) else logging.INFO
        logger.log(
            level,
            f"{__name__}:dispatch - {route} -> {response.status_code} in {elapsed}ms",
            extra={"status_code": response.status_code, "elapsed_ms": elapsed, "has_session": has_session},
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind the request's correlation ID and return it in the response headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
