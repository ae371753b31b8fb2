"""
Router utility functions.

Contains helper functions extracted from router endpoints to keep them clean.
"""

from ivy.api.routers.router_utils.error_handling import handle_service_errors, to_http_exception
from ivy.api.routers.router_utils.session_cookie import (
    clear_session_cookie,
    mint_session_id,
    read_session_id,
    resolve_session_id,
    set_session_cookie,
)

__all__ = [
    "clear_session_cookie",
    "handle_service_errors",
    "mint_session_id",
    "read_session_id",
    "resolve_session_id",
    "set_session_cookie",
    "to_http_exception",
]
