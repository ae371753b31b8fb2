"""
Liveness and index readiness checks.

Routes: GET /health, GET /health/index

/health never touches a dependency. /health/index reports how many
chunks the active generation holds; an empty corpus is a valid state
(replies are then ungrounded), so it is reported as "empty", not failed.

Dependencies: fastapi, ivy.api.deps
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ivy.api.deps import get_chunk_index, get_indexer, get_settings_dependency
from ivy.application.services.reindex_service import CorpusIndexer
from ivy.configs.settings import Settings
from ivy.core.interfaces import ChunkIndex

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    status: str
    environment: str


class IndexReadinessResponse(BaseModel):
    status: str
    chunks: int
    dimension: int | None = None
    reindexing: bool = False


@router.get("", response_model=LivenessResponse)
async def liveness(settings: Settings = Depends(get_settings_dependency)) -> LivenessResponse:
    return LivenessResponse(status="healthy", environment=settings.environment)


@router.get("/index", response_model=IndexReadinessResponse)
async def index_readiness(
    index: ChunkIndex = Depends(get_chunk_index),
    indexer: CorpusIndexer = Depends(get_indexer),
) -> IndexReadinessResponse:
    """Chunk count and vector length of the generation serving queries."""
    chunks = await index.acount()
    return IndexReadinessResponse(
        status="healthy" if chunks else "empty",
        chunks=chunks,
        dimension=index.dimension,
        reindexing=indexer.is_running,
    )
