"""
Chat domain models and schemas.

Request/response schemas for chat, RAG and search operations.
Request bodies are coerced into strict typed structures; unknown fields
and unknown modes are rejected.

Dependencies: pydantic, ivy.core.validation
System role: Chat API contracts
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ivy.core.exceptions import ValidationError
from ivy.core.validation import sanitize_chat_message, sanitize_rag_query
from ivy.models.chunk import SourceRef


class ChatMode(str, Enum):
    """Request mode for POST /chat."""

    CONVERSATION = "conversation"
    QUERY = "query"


class ChatRequest(BaseModel):
    """Request schema for chat messages."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    message: str = Field(description="User message")
    mode: ChatMode = Field(default=ChatMode.CONVERSATION, description="conversation or query")
    clear_context: bool = Field(
        default=False,
        alias="clearContext",
        description="Reset the session before handling the message",
    )

    @field_validator("message")
    @classmethod
    def _sanitize_message(cls, value: str) -> str:
        try:
            return sanitize_chat_message(value)
        except ValidationError as e:
            raise ValueError(e.message) from e


class ChatResponse(BaseModel):
    """Response schema for chat messages."""

    model_config = ConfigDict(populate_by_name=True)

    response: str
    session_id: str = Field(alias="sessionId")
    sources: list[SourceRef] = Field(default_factory=list)


class ChatMessageResponse(BaseModel):
    """Single chat message in history."""

    role: str = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")


class ChatHistoryResponse(BaseModel):
    """Response schema for chat history."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    messages: list[ChatMessageResponse]
    summary: str | None = None


class RagRequest(BaseModel):
    """Request schema for stateless grounded answers."""

    model_config = ConfigDict(extra="forbid")

    message: str = Field(description="Question to answer from the corpus")

    @field_validator("message")
    @classmethod
    def _sanitize_message(cls, value: str) -> str:
        try:
            return sanitize_rag_query(value)
        except ValidationError as e:
            raise ValueError(e.message) from e


class RagResponse(BaseModel):
    """Grounded answer with chunk provenance."""

    response: str
    sources: list[SourceRef]


class SearchHit(BaseModel):
    """One search result."""

    slug: str
    chunk_index: int
    content: str
    distance: float


class SearchResponse(BaseModel):
    """Response schema for GET /search."""

    results: list[SearchHit]


class ReindexAccepted(BaseModel):
    """Acknowledgement for a scheduled re-index."""

    status: str = "accepted"


class ChatResult(BaseModel):
    """Outcome of one orchestrated turn."""

    response: str
    session_id: str | None = None
    sources: list[SourceRef] = Field(default_factory=list)
    grounded: bool = False
    model: str | None = None
