"""
Request correlation identifiers.

Every HTTP request carries one identifier from the moment it enters the
middleware stack until the response leaves. Callers may supply their own
through the X-Correlation-ID header; anything that does not look like an
identifier is replaced so clients cannot forge log lines.

Dependencies: contextvars
System role: Ties log lines from one chat or re-index request together
"""

import re
import uuid
from contextvars import ContextVar

CORRELATION_HEADER = "X-Correlation-ID"

_ACCEPTABLE_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")
_current: ContextVar[str] = ContextVar("ivy_correlation_id", default="")


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind an identifier to the running context and return it.

    A missing or malformed value is replaced with a fresh one.
    """
    if not correlation_id or not _ACCEPTABLE_ID.match(correlation_id):
        correlation_id = new_correlation_id()
    _current.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    """Identifier of the request being served, or "" outside of one."""
    return _current.get()


def clear_correlation_id() -> None:
    _current.set("")
