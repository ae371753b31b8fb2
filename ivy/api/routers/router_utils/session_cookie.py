"""
Session cookie helpers.

The session identifier travels in an http-only cookie. A missing or
malformed identifier is replaced with a freshly minted one.
"""

import uuid

from fastapi import Request, Response

from ivy.configs.session import SessionSettings
from ivy.core.validation import is_valid_session_id


def mint_session_id() -> str:
    """New opaque session identifier."""
    return uuid.uuid4().hex


def read_session_id(request: Request, settings: SessionSettings) -> str | None:
    """Session identifier from the request cookie, None if missing or malformed."""
    value = request.cookies.get(settings.cookie_name)
    return value if is_valid_session_id(value) else None


def resolve_session_id(request: Request, settings: SessionSettings) -> str:
    """Session identifier from the cookie, minting one when needed."""
    return read_session_id(request, settings) or mint_session_id()


def set_session_cookie(response: Response, session_id: str, settings: SessionSettings) -> None:
    """Attach the session cookie; it expires with the idle timeout."""
    response.set_cookie(
        key=settings.cookie_name,
        value=session_id,
        max_age=settings.timeout_seconds,
        httponly=True,
        secure=settings.cookie_is_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, settings: SessionSettings) -> None:
    response.delete_cookie(key=settings.cookie_name, path="/")
