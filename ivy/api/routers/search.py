"""Search API endpoints.

Routes:
- GET /search?q=... - Ranked corpus chunks for a free-text query

Dependencies: ivy.application.services.chat_service
System role: Corpus search HTTP API
"""

import logging
from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ivy.api.deps import get_chat_service
from ivy.api.routers.router_utils import handle_service_errors
from ivy.application.services.chat_service import ChatService
from ivy.core.exceptions import ValidationError
from ivy.core.validation import sanitize_search_query
from ivy.models.chat import SearchHit, SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


class SearchMode(str, Enum):
    VECTOR = "vector"
    TEXT = "text"


@router.get("", response_model=SearchResponse)
@handle_service_errors
async def search(
    q: str = Query(default="", description="Search query"),
    mode: SearchMode = Query(default=SearchMode.VECTOR, description="vector or text"),
    chat_service: ChatService = Depends(get_chat_service),
) -> SearchResponse:
    """Search the corpus.

    Args:
        q: Free-text query (1..500 characters after normalisation)
        mode: Vector similarity or full-text keyword search
        chat_service: Injected ChatService

    Returns:
        SearchResponse: Hits ascending by distance

    Raises:
        HTTPException(400): Missing, blank or oversized query
    """
    try:
        query = sanitize_search_query(q)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    result = await chat_service.search(query, text_only=mode == SearchMode.TEXT)
    return SearchResponse(
        results=[
            SearchHit(
                slug=item.chunk.slug,
                chunk_index=item.chunk.chunk_index,
                content=item.chunk.content,
                distance=item.distance,
            )
            for item in result.items
        ]
    )
