"""
Domain models and API schemas.
"""

from ivy.models.chat import ChatMode, ChatResult
from ivy.models.chunk import Chunk, RetrievalResult, ScoredChunk, SourceRef
from ivy.models.content import ContentDocument, ReindexReport
from ivy.models.session import Message, Role, Session

__all__ = [
    "ChatMode",
    "ChatResult",
    "Chunk",
    "ContentDocument",
    "Message",
    "ReindexReport",
    "RetrievalResult",
    "Role",
    "ScoredChunk",
    "Session",
    "SourceRef",
]
