"""
Process-wide logging setup.

Installs one stdout handler on the root logger whose records carry the
correlation ID of the request that produced them. Both the API process
and the re-index CLI call configure_logging once at startup.

Dependencies: logging (stdlib), ivy.observability.correlation
System role: Centralized logging configuration
"""

import logging
import sys

from ivy.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(correlation_id)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Client libraries that log every HTTP round trip at INFO
QUIET_LOGGERS = ("urllib3", "botocore", "boto3", "httpx", "httpcore", "faiss", "google")


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the active correlation ID ("-" when idle)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def _level_from_name(level: str) -> int:
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str = "INFO") -> None:
    """
    Replace the root handlers with a single correlation-aware stdout handler.

    Safe to call more than once; the last call wins.

    Args:
        level: Level name for the root logger; unknown names fall back to INFO
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    stream = logging.StreamHandler(sys.stdout)
    stream.addFilter(CorrelationIdFilter())
    stream.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root.addHandler(stream)
    root.setLevel(_level_from_name(level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
