"""
FastAPI dependencies.
"""

from ivy.api.deps.dependencies import (
    ServiceCache,
    get_chat_service,
    get_chunk_index,
    get_indexer,
    get_service_cache,
    get_session_store,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_chat_service",
    "get_chunk_index",
    "get_indexer",
    "get_service_cache",
    "get_session_store",
    "get_settings_dependency",
]
