"""
Dependency injection container.

ServiceCache builds every long-lived component once per application and
FastAPI dependencies hand them to routers. Components may be supplied up
front, which is how tests inject fakes.

Dependencies: fastapi, ivy.configs, ivy.application, ivy.boundary
System role: DI container for service injection
"""

import logging
from datetime import timedelta

from fastapi import Depends, Request

from ivy.application.services import ChatService, CorpusIndexer, SessionSweeper
from ivy.configs import Settings, get_settings
from ivy.core.chunking import ParagraphChunker
from ivy.core.compactor import ContextCompactor
from ivy.core.exceptions import ConfigurationError
from ivy.core.interfaces import (
    ChunkIndex,
    CompletionClient,
    ContentSource,
    EmbeddingClient,
    SessionRepository,
)
from ivy.core.retrieval import RetrievalEngine
from ivy.core.session_store import SessionStore

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached service instances."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        repository: SessionRepository | None = None,
        completion: CompletionClient | None = None,
        embedder: EmbeddingClient | None = None,
        chunk_index: ChunkIndex | None = None,
        content_source: ContentSource | None = None,
    ) -> None:
        self._settings = settings
        self._repository = repository
        self._completion = completion
        self._embedder = embedder
        self._chunk_index = chunk_index
        self._content_source = content_source
        self._engine = None
        self._session_store = None
        self._retrieval = None
        self._chat_service = None
        self._indexer = None
        self._sweeper = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def repository(self) -> SessionRepository:
        """Get cached session repository."""
        if self._repository is None:
            store_type = self.settings.session.store_type.lower()
            if store_type == "memory":
                from ivy.boundary.db.memory_repository import InMemorySessionRepository
                self._repository = InMemorySessionRepository()
            elif store_type == "sql":
                from ivy.boundary.db.connection import get_async_engine, get_async_session_factory
                from ivy.boundary.db.CRUD.session_crud import SqlSessionRepository
                self._engine = get_async_engine(self.settings.database)
                self._repository = SqlSessionRepository(get_async_session_factory(self._engine))
            else:
                raise ConfigurationError(
                    f"Invalid session store type: {store_type}. Must be 'memory' or 'sql'.",
                    setting="SESSION_STORE_TYPE",
                )
            logger.info(f"{__name__}:repository - Using {store_type} session store")
        return self._repository

    @property
    def completion(self) -> CompletionClient:
        """Get cached completion client."""
        if self._completion is None:
            from ivy.boundary.llm.gemini_completion import GeminiCompletionClient
            self._completion = GeminiCompletionClient(self.settings.llm)
        return self._completion

    @property
    def embedder(self) -> EmbeddingClient:
        """Get cached embedding client."""
        if self._embedder is None:
            from ivy.boundary.vdb.vector_store_factory import get_embedding_client
            self._embedder = get_embedding_client(self.settings)
        return self._embedder

    @property
    def chunk_index(self) -> ChunkIndex:
        """Get cached chunk index."""
        if self._chunk_index is None:
            from ivy.boundary.vdb.vector_store_factory import get_chunk_index
            self._chunk_index = get_chunk_index(self.settings)
        return self._chunk_index

    @property
    def content_source(self) -> ContentSource:
        """Get cached content source."""
        if self._content_source is None:
            content = self.settings.content
            source_type = content.source_type.lower()
            if source_type == "local":
                from ivy.boundary.content.local_source import LocalContentSource
                self._content_source = LocalContentSource(content.local_dir)
            elif source_type == "s3":
                from ivy.boundary.content.s3_source import S3ContentSource
                self._content_source = S3ContentSource(
                    bucket=content.s3_bucket,
                    prefix=content.s3_prefix,
                    region=content.s3_region,
                )
            else:
                raise ConfigurationError(
                    f"Invalid content source type: {source_type}. Must be 'local' or 's3'.",
                    setting="CONTENT_SOURCE_TYPE",
                )
        return self._content_source

    @property
    def session_store(self) -> SessionStore:
        """Get cached session store."""
        if self._session_store is None:
            session = self.settings.session
            compactor = ContextCompactor(
                self.completion,
                window_size=session.window_size,
                word_threshold=session.compaction_word_threshold,
                max_tokens=self.settings.llm.summary_max_tokens,
            )
            self._session_store = SessionStore(
                self.repository,
                compactor,
                timeout=timedelta(minutes=session.timeout_minutes),
                max_write_retries=session.max_write_retries,
            )
        return self._session_store

    @property
    def retrieval(self) -> RetrievalEngine:
        """Get cached retrieval engine."""
        if self._retrieval is None:
            self._retrieval = RetrievalEngine(
                self.embedder,
                self.chunk_index,
                expected_dimension=self.settings.vector_store.embedding_dimension,
            )
        return self._retrieval

    @property
    def chat_service(self) -> ChatService:
        """Get cached chat service."""
        if self._chat_service is None:
            self._chat_service = ChatService(
                self.session_store,
                self.retrieval,
                self.completion,
                self.settings,
            )
        return self._chat_service

    @property
    def indexer(self) -> CorpusIndexer:
        """Get cached corpus indexer."""
        if self._indexer is None:
            content = self.settings.content
            self._indexer = CorpusIndexer(
                self.content_source,
                ParagraphChunker(
                    chunk_size=content.chunk_size,
                    overlap_words=content.overlap_words,
                    fallback_window_words=content.fallback_window_words,
                ),
                self.embedder,
                self.chunk_index,
                batch_size=content.embed_batch_size,
            )
        return self._indexer

    @property
    def sweeper(self) -> SessionSweeper:
        """Get cached session sweeper."""
        if self._sweeper is None:
            self._sweeper = SessionSweeper(
                self.session_store,
                interval_seconds=self.settings.session.sweep_interval_seconds,
            )
        return self._sweeper

    async def startup(self) -> None:
        """Warm services, create tables and start the sweeper."""
        _ = self.chat_service
        _ = self.chunk_index
        if self._engine is not None:
            from ivy.boundary.db.connection import create_tables
            await create_tables(self._engine)
        self.sweeper.start()

    async def shutdown(self) -> None:
        """Stop background work and release connections."""
        if self._sweeper is not None:
            await self._sweeper.stop()
        if self._engine is not None:
            await self._engine.dispose()
        self.clear()

    def clear(self) -> None:
        """Drop built services; injected components are kept."""
        if self._engine is not None:
            self._repository = None
        self._engine = None
        self._session_store = None
        self._retrieval = None
        self._chat_service = None
        self._indexer = None
        self._sweeper = None


def get_service_cache(request: Request) -> ServiceCache:
    """Get the service cache of the running application."""
    return request.app.state.services


def get_settings_dependency(cache: ServiceCache = Depends(get_service_cache)) -> Settings:
    """Get settings of the running application."""
    return cache.settings


def get_chat_service(cache: ServiceCache = Depends(get_service_cache)) -> ChatService:
    """
    Get chat service instance.

    Args:
        cache: Service cache (injected via Depends)

    Returns:
        ChatService: Cached chat service
    """
    return cache.chat_service


def get_session_store(cache: ServiceCache = Depends(get_service_cache)) -> SessionStore:
    """Get session store instance."""
    return cache.session_store


def get_indexer(cache: ServiceCache = Depends(get_service_cache)) -> CorpusIndexer:
    """Get corpus indexer instance."""
    return cache.indexer


def get_chunk_index(cache: ServiceCache = Depends(get_service_cache)) -> ChunkIndex:
    """Get chunk index instance."""
    return cache.chunk_index
