"""RAG API endpoints.

Routes:
- POST /rag - Stateless grounded answer with chunk provenance
- POST /rag/refresh - Schedule a corpus re-index (token protected)

Dependencies: ivy.application.services
System role: Grounded answer and re-index HTTP API
"""

import logging
import secrets

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, status

from ivy.api.deps import get_chat_service, get_indexer, get_settings_dependency
from ivy.api.routers.router_utils import handle_service_errors
from ivy.application.services.chat_service import ChatService
from ivy.application.services.reindex_service import CorpusIndexer
from ivy.configs import Settings
from ivy.core.exceptions import IvyException
from ivy.models.chat import RagRequest, RagResponse, ReindexAccepted

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rag", tags=["rag"])

REINDEX_TOKEN_HEADER = "X-Reindex-Token"


@router.post("", response_model=RagResponse)
@handle_service_errors
async def rag(
    body: RagRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> RagResponse:
    """Answer one question from the corpus.

    Args:
        body: Validated RagRequest
        chat_service: Injected ChatService

    Returns:
        RagResponse: Answer and the (slug, chunk_index) of every chunk used

    Raises:
        HTTPException(422): Empty or oversized message
        HTTPException(502): Completion failed
    """
    result = await chat_service.answer_with_sources(body.message)
    return RagResponse(response=result.response, sources=result.sources)


async def run_reindex(indexer: CorpusIndexer) -> None:
    """Background re-index; failures are logged since no client is waiting."""
    try:
        report = await indexer.areindex()
        logger.info(
            f"{__name__}:run_reindex - Completed: {report.documents_processed} documents, "
            f"{report.chunks_created} chunks in {report.time_taken_seconds}s"
        )
    except IvyException as e:
        logger.error(f"{__name__}:run_reindex - {type(e).__name__}: {e.message}")


@router.post(
    "/refresh",
    response_model=ReindexAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def refresh(
    background_tasks: BackgroundTasks,
    reindex_token: str | None = Header(default=None, alias=REINDEX_TOKEN_HEADER),
    indexer: CorpusIndexer = Depends(get_indexer),
    settings: Settings = Depends(get_settings_dependency),
) -> ReindexAccepted:
    """Schedule a full corpus re-index.

    Raises:
        HTTPException(401): Missing or wrong token, or no token configured
        HTTPException(409): A re-index is already running
    """
    expected = settings.content.reindex_token
    if not expected or not reindex_token or not secrets.compare_digest(reindex_token.encode(), expected.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if indexer.is_running:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A re-index is already running",
        )

    background_tasks.add_task(run_reindex, indexer)
    logger.info(f"{__name__}:refresh - Re-index scheduled")
    return ReindexAccepted()
