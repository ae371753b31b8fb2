"""
Observability package: logging setup, correlation IDs and request middleware.
"""

from ivy.observability.correlation import CORRELATION_HEADER, get_correlation_id, set_correlation_id
from ivy.observability.logger import configure_logging

__all__ = [
    "CORRELATION_HEADER",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
