"""
Test suite for dependency injection container.

Tests ServiceCache construction of services from settings, reuse of
cached instances, injected components and the lifespan hooks.

System role: Verification of DI container
"""

import pytest

from ivy.api.deps.dependencies import ServiceCache
from ivy.application.services import ChatService, CorpusIndexer, SessionSweeper
from ivy.boundary.content.local_source import LocalContentSource
from ivy.boundary.content.s3_source import S3ContentSource
from ivy.boundary.db.CRUD.session_crud import SqlSessionRepository
from ivy.boundary.db.memory_repository import InMemorySessionRepository
from ivy.boundary.llm.gemini_embedder import GeminiEmbeddingClient
from ivy.boundary.vdb.faiss_chunk_index import FaissChunkIndex
from ivy.core.exceptions import ConfigurationError


class TestServiceCacheConstruction:
    """Test suite for lazily built services."""

    def test_services_should_be_built_once(self, services) -> None:
        # Act
        first = services.chat_service
        second = services.chat_service

        # Assert
        assert isinstance(first, ChatService)
        assert first is second
        assert first.store is services.session_store

    def test_injected_components_should_be_used(self, services, repository, populated_index) -> None:
        # Assert
        assert services.repository is repository
        assert services.chunk_index is populated_index
        assert services.retrieval.index is populated_index

    def test_indexer_should_use_content_settings(self, services, settings) -> None:
        # Act
        indexer = services.indexer

        # Assert
        assert isinstance(indexer, CorpusIndexer)
        assert indexer.batch_size == settings.content.embed_batch_size

    def test_memory_store_type_should_build_in_memory_repository(self, settings) -> None:
        # Arrange
        settings.session.store_type = "memory"

        # Act / Assert
        assert isinstance(ServiceCache(settings).repository, InMemorySessionRepository)

    def test_sql_store_type_should_build_sql_repository(self, settings, tmp_path) -> None:
        # Arrange
        settings.session.store_type = "sql"
        settings.database.url = f"sqlite+aiosqlite:///{tmp_path / 'sessions.db'}"

        # Act / Assert
        assert isinstance(ServiceCache(settings).repository, SqlSessionRepository)

    def test_unknown_store_type_should_raise(self, settings) -> None:
        # Arrange
        settings.session.store_type = "redis"

        # Act / Assert
        with pytest.raises(ConfigurationError):
            _ = ServiceCache(settings).repository

    @pytest.mark.parametrize(
        "source_type, expected",
        [("local", LocalContentSource), ("s3", S3ContentSource)],
    )
    def test_content_source_should_follow_source_type(
        self, settings, source_type, expected
    ) -> None:
        # Arrange
        settings.content.source_type = source_type

        # Act / Assert
        assert isinstance(ServiceCache(settings).content_source, expected)

    def test_unknown_content_source_should_raise(self, settings) -> None:
        # Arrange
        settings.content.source_type = "ftp"

        # Act / Assert
        with pytest.raises(ConfigurationError):
            _ = ServiceCache(settings).content_source

    def test_default_search_backends_should_come_from_settings(self, settings, tmp_path) -> None:
        # Arrange
        settings.vector_store.index_dir = str(tmp_path / "index")
        cache = ServiceCache(settings)

        # Act / Assert
        assert isinstance(cache.chunk_index, FaissChunkIndex)
        assert isinstance(cache.embedder, GeminiEmbeddingClient)
        assert cache.embedder.dimension == settings.vector_store.embedding_dimension


class TestServiceCacheLifespan:
    """Test suite for startup and shutdown."""

    @pytest.mark.asyncio
    async def test_startup_should_start_sweeper_and_shutdown_stop_it(self, services) -> None:
        # Act
        await services.startup()
        sweeper = services.sweeper

        # Assert
        assert isinstance(sweeper, SessionSweeper)
        assert sweeper.is_running

        await services.shutdown()
        assert not sweeper.is_running

    @pytest.mark.asyncio
    async def test_shutdown_should_keep_injected_components(self, services, repository) -> None:
        # Arrange
        await services.startup()

        # Act
        await services.shutdown()

        # Assert
        assert services.repository is repository

    @pytest.mark.asyncio
    async def test_startup_with_sql_store_should_create_tables(self, settings, tmp_path, fake_completion) -> None:
        # Arrange
        settings.session.store_type = "sql"
        settings.database.url = f"sqlite+aiosqlite:///{tmp_path / 'sessions.db'}"
        settings.vector_store.index_dir = str(tmp_path / "index")
        cache = ServiceCache(settings, completion=fake_completion)

        # Act
        await cache.startup()
        count = await cache.repository.count()
        await cache.shutdown()

        # Assert
        assert count == 0
