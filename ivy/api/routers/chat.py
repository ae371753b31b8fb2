"""Chat API endpoints.

Routes:
- POST /chat - Send a message in conversation or query mode
- GET /chat/history - Current window and summary of the caller's session
- DELETE /chat/session - Forget the caller's session

The session identifier is carried in an http-only cookie.

Dependencies: ivy.application.services.chat_service, ivy.core.session_store
System role: Chat messaging HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from ivy.api.deps import get_chat_service, get_session_store, get_settings_dependency
from ivy.api.routers.router_utils import (
    clear_session_cookie,
    handle_service_errors,
    read_session_id,
    resolve_session_id,
    set_session_cookie,
)
from ivy.application.services.chat_service import ChatService
from ivy.configs import Settings
from ivy.core.session_store import SessionStore
from ivy.models.chat import (
    ChatHistoryResponse,
    ChatMessageResponse,
    ChatMode,
    ChatRequest,
    ChatResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
@handle_service_errors
async def chat(
    body: ChatRequest,
    request: Request,
    response: Response,
    chat_service: ChatService = Depends(get_chat_service),
    settings: Settings = Depends(get_settings_dependency),
) -> ChatResponse:
    """Send a chat message.

    Flow:
    1. Read the session id from the cookie, minting one if absent or malformed
    2. Conversation mode: run the turn against the session memory
       Query mode: answer statelessly, session untouched
    3. Refresh the session cookie

    Args:
        body: Validated ChatRequest
        request: Incoming request (cookie source)
        response: Outgoing response (cookie sink)
        chat_service: Injected ChatService
        settings: Injected settings

    Returns:
        ChatResponse: Reply, session id and sources

    Raises:
        HTTPException(422): Invalid body (empty/oversized message, unknown mode)
        HTTPException(500): Completion credentials not configured
        HTTPException(502): Completion failed on primary and fallback model
    """
    session_id = resolve_session_id(request, settings.session)

    if body.mode == ChatMode.QUERY:
        result = await chat_service.query(body.message)
    else:
        result = await chat_service.converse(
            session_id,
            body.message,
            clear_context=body.clear_context,
        )

    set_session_cookie(response, session_id, settings.session)
    return ChatResponse(response=result.response, session_id=session_id, sources=result.sources)


@router.get("/history", response_model=ChatHistoryResponse)
@handle_service_errors
async def chat_history(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings_dependency),
) -> ChatHistoryResponse:
    """Return the caller's current message window and running summary.

    A caller without a valid cookie gets a new, empty session.
    """
    session_id = resolve_session_id(request, settings.session)
    session = await store.resolve(session_id)

    set_session_cookie(response, session_id, settings.session)
    return ChatHistoryResponse(
        session_id=session_id,
        messages=[
            ChatMessageResponse(role=m.role.value, content=m.content)
            for m in session.conversation()
        ],
        summary=session.summary,
    )


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT)
@handle_service_errors
async def reset_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings_dependency),
) -> Response:
    """Forget the caller's session. Idempotent."""
    session_id = read_session_id(request, settings.session)
    if session_id is not None:
        await store.reset(session_id)

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response, settings.session)
    return response
