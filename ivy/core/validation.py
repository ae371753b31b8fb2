"""
Input sanitization for user-supplied text.

Trims, strips control characters and enforces per-endpoint length limits
before any text reaches a core component.

Dependencies: ivy.core.exceptions
System role: Boundary validation rules shared by request models and routers
"""

import re

from ivy.core.exceptions import ValidationError

CHAT_MESSAGE_MAX_LENGTH = 2000
RAG_QUERY_MAX_LENGTH = 1000
SEARCH_QUERY_MAX_LENGTH = 500

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_text(
    value: str,
    max_length: int,
    field: str = "message",
    collapse_whitespace: bool = False,
) -> str:
    """
    Validate and clean a piece of user text.

    Args:
        value: Raw text
        max_length: Maximum accepted length of the raw text
        field: Field name reported in errors
        collapse_whitespace: Normalize internal whitespace runs to one space

    Returns:
        str: Trimmed text without control characters

    Raises:
        ValidationError: Text is empty, too long, or only control characters
    """
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field} must be a non-empty string", field=field)
    if len(value) > max_length:
        raise ValidationError(
            f"{field} too long (max {max_length} characters)",
            field=field,
            details={"length": len(value)},
        )

    cleaned = _CONTROL_CHARS.sub("", value.strip())
    if collapse_whitespace:
        cleaned = _WHITESPACE_RUN.sub(" ", cleaned)
    cleaned = cleaned.strip()[:max_length]

    if not cleaned:
        raise ValidationError(f"{field} contains only invalid characters", field=field)
    return cleaned


def sanitize_chat_message(value: str) -> str:
    return sanitize_text(value, CHAT_MESSAGE_MAX_LENGTH, field="message")


def sanitize_rag_query(value: str) -> str:
    return sanitize_text(value, RAG_QUERY_MAX_LENGTH, field="message")


def sanitize_search_query(value: str) -> str:
    return sanitize_text(value, SEARCH_QUERY_MAX_LENGTH, field="q", collapse_whitespace=True)


_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{8,128}$")


def is_valid_session_id(value: str | None) -> bool:
    """Whether a client-presented session identifier is well formed."""
    return bool(value) and bool(_SESSION_ID_PATTERN.match(value))
