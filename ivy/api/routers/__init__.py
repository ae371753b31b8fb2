"""
API routers.
"""

from ivy.api.routers.chat import router as chat_router
from ivy.api.routers.health import router as health_router
from ivy.api.routers.rag import router as rag_router
from ivy.api.routers.search import router as search_router

__all__ = ["chat_router", "health_router", "rag_router", "search_router"]
