"""
Shared test fixtures and configuration for entire test suite.

Provides: fake completion and embedding clients, in-memory session
repository, FAISS chunk index in memory, settings and service container
Dependencies: pytest, ivy, tests.fakes
System role: Test infrastructure and fixture management
"""

from datetime import timedelta

import pytest

from ivy.api.deps.dependencies import ServiceCache
from ivy.boundary.db.memory_repository import InMemorySessionRepository
from ivy.boundary.vdb.faiss_chunk_index import FaissChunkIndex
from ivy.configs.content import ContentSettings
from ivy.configs.llm import LLMSettings
from ivy.configs.session import SessionSettings
from ivy.configs.settings import Settings
from ivy.configs.vector_store import VectorStoreSettings
from ivy.core.compactor import ContextCompactor
from ivy.core.retrieval import RetrievalEngine
from ivy.core.session_store import SessionStore
from ivy.models.content import ContentDocument
from tests.fakes import (
    FALLBACK_MODEL,
    PRIMARY_MODEL,
    SAMPLE_CHUNKS,
    TEST_DIMENSION,
    FakeCompletion,
    FakeContentSource,
    FakeEmbedder,
    make_chunk,
)


@pytest.fixture
def settings() -> Settings:
    """Settings with small, test-friendly values."""
    return Settings(
        session=SessionSettings(
            window_size=20,
            compaction_word_threshold=1500,
            timeout_minutes=30,
            max_write_retries=3,
        ),
        llm=LLMSettings(
            google_api_key=None,
            chat_model=PRIMARY_MODEL,
            fallback_model=FALLBACK_MODEL,
        ),
        vector_store=VectorStoreSettings(
            persist=False,
            embedding_dimension=TEST_DIMENSION,
            top_k=4,
            search_top_k=8,
        ),
        content=ContentSettings(reindex_token="s3cret-token", embed_batch_size=2),
    )


@pytest.fixture
def fake_completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def chunk_index(tmp_path) -> FaissChunkIndex:
    """Empty in-memory FAISS chunk index."""
    return FaissChunkIndex(tmp_path / "index", dimension=TEST_DIMENSION, persist=False)


@pytest.fixture
async def populated_index(chunk_index: FaissChunkIndex) -> FaissChunkIndex:
    """FAISS chunk index holding SAMPLE_CHUNKS."""
    await chunk_index.areplace_all([make_chunk(*row) for row in SAMPLE_CHUNKS])
    return chunk_index


@pytest.fixture
def compactor(fake_completion: FakeCompletion) -> ContextCompactor:
    return ContextCompactor(fake_completion, window_size=20, word_threshold=1500, max_tokens=300)


@pytest.fixture
def session_store(repository, compactor) -> SessionStore:
    return SessionStore(repository, compactor, timeout=timedelta(minutes=30), max_write_retries=3)


@pytest.fixture
def retrieval(fake_embedder, populated_index) -> RetrievalEngine:
    return RetrievalEngine(fake_embedder, populated_index, expected_dimension=TEST_DIMENSION)


@pytest.fixture
def services(settings, repository, fake_completion, fake_embedder, populated_index) -> ServiceCache:
    """Service container wired with fakes and a populated index."""
    return ServiceCache(
        settings,
        repository=repository,
        completion=fake_completion,
        embedder=fake_embedder,
        chunk_index=populated_index,
        content_source=FakeContentSource([
            ContentDocument(slug="journal/finding-flow", content="Flow arrives.\n\nRivers follow."),
        ]),
    )
