"""
Helpers for putting values into log records without leaking them.

Conversation text never reaches a log line verbatim: services log
text_stats() of a message instead. Structured extras go through
safe_log_value so a large payload becomes a short description.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any


def _describe(value: Any) -> str:
    if value is None:
        return "None"
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple, set)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render value as a bounded string for a log record.

    Collections are reduced to their size. Strings longer than
    max_length are cut and annotated with their full length.
    """
    try:
        rendered = _describe(value)
    except Exception as e:  # a broken __str__ must not break logging
        return f"<unrenderable {type(value).__name__}: {type(e).__name__}>"
    if len(rendered) <= max_length:
        return rendered
    return f"{rendered[:max_length]}... (truncated, {len(rendered)} total)"


def text_stats(text: str | None) -> str:
    """Length and word count of a message, standing in for its content."""
    if not text:
        return "len=0"
    return f"len={len(text)}, words={len(text.split())}"


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Emit message with every keyword attached to the record as a rendered extra."""
    logger.log(level, message, extra={key: safe_log_value(value) for key, value in context.items()})
