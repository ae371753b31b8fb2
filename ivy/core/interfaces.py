"""
Capability interfaces consumed by the core.

The orchestrator, retrieval engine and session store depend on these
protocols only; concrete providers live in ivy.boundary and are injected
through constructors so the core runs against fakes in tests.

Dependencies: langchain_core.messages, ivy.models
System role: Seams between core logic and external services
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from langchain_core.messages import BaseMessage

from ivy.models.chunk import Chunk, ScoredChunk
from ivy.models.content import ContentDocument
from ivy.models.session import Session


@runtime_checkable
class EmbeddingClient(Protocol):
    """Turns text into fixed-length vectors."""

    @property
    def dimension(self) -> int: ...

    async def aembed_query(self, text: str) -> list[float]: ...

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]: ...


@runtime_checkable
class CompletionClient(Protocol):
    """Produces a reply for a list of chat messages."""

    @property
    def primary_model(self) -> str: ...

    async def acomplete(
        self,
        messages: list[BaseMessage],
        *,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> str: ...


@runtime_checkable
class ChunkIndex(Protocol):
    """k-nearest chunk search plus a parallel full-text index."""

    @property
    def dimension(self) -> int | None: ...

    def count(self) -> int: ...

    async def acount(self) -> int: ...

    async def asearch(self, embedding: list[float], k: int) -> list[ScoredChunk]: ...

    async def atext_search(self, query: str, k: int) -> list[ScoredChunk]: ...

    async def areplace_all(self, chunks: list[Chunk]) -> None: ...


@runtime_checkable
class SessionRepository(Protocol):
    """Keyed persistence for session records."""

    async def get(self, session_id: str) -> Session | None: ...

    async def save(self, session: Session, expected_version: int) -> Session: ...

    async def delete(self, session_id: str) -> None: ...

    async def delete_idle_since(self, cutoff: datetime) -> int: ...


@runtime_checkable
class ContentSource(Protocol):
    """External content store holding the corpus."""

    async def afetch_documents(self) -> list[ContentDocument]: ...
