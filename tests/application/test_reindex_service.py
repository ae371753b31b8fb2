"""
Test suite for CorpusIndexer.

Covers chunking and embedding of documents, skipping documents whose
embeddings fail, atomic replacement and rejection of concurrent runs.

System role: Verification of the corpus ingestion pipeline
"""

import asyncio
import math

import pytest

from ivy.application.services.reindex_service import CorpusIndexer
from ivy.core.chunking import ParagraphChunker
from ivy.core.exceptions import ContentSourceError, EmbeddingError, ReindexInProgressError
from ivy.models.content import ContentDocument
from tests.fakes import FakeContentSource, FakeEmbedder, bag_of_words_vector

DOCUMENTS = [
    ContentDocument(slug="journal/finding-flow", content="Flow arrives.\n\nRivers follow the land."),
    ContentDocument(slug="docs/codex/resonance", content="Resonance amplifies."),
    ContentDocument(slug="journal/empty", content=""),
]


class SlowContentSource(FakeContentSource):
    """Content source that waits until released."""

    def __init__(self, documents) -> None:
        super().__init__(documents)
        self.release = asyncio.Event()

    async def afetch_documents(self):
        await self.release.wait()
        return await super().afetch_documents()


class FailingContentSource:
    async def afetch_documents(self):
        raise ContentSourceError("bucket unreachable")


class NonFiniteEmbedder(FakeEmbedder):
    async def aembed_documents(self, texts):
        return [[math.nan] * self.dimension for _ in texts]


async def _no_sleep(_seconds) -> None:
    return None


def make_indexer(source, embedder, index, chunk_size: int = 20) -> CorpusIndexer:
    return CorpusIndexer(
        source,
        ParagraphChunker(chunk_size=chunk_size, overlap_words=0),
        embedder,
        index,
        batch_size=2,
        max_attempts=1,
    )


class TestCorpusIndexer:
    """Test suite for CorpusIndexer.areindex."""

    @pytest.mark.asyncio
    async def test_reindex_should_chunk_embed_and_replace(self, fake_embedder, chunk_index) -> None:
        # Arrange
        indexer = make_indexer(FakeContentSource(DOCUMENTS), fake_embedder, chunk_index)

        # Act
        report = await indexer.areindex()

        # Assert
        assert report.documents_fetched == 3
        assert report.documents_processed == 3
        assert report.documents_skipped == 0
        assert report.chunks_created == 3
        assert report.embedding_dimension == fake_embedder.dimension
        assert chunk_index.count() == 3
        hits = await chunk_index.asearch(bag_of_words_vector("resonance amplifies"), k=3)
        assert {(h.chunk.slug, h.chunk.chunk_index) for h in hits} == {
            ("journal/finding-flow", 0),
            ("journal/finding-flow", 1),
            ("docs/codex/resonance", 0),
        }

    @pytest.mark.asyncio
    async def test_provenance_header_should_be_embedded_but_not_stored(
        self, fake_embedder, chunk_index
    ) -> None:
        # Arrange
        indexer = make_indexer(FakeContentSource(DOCUMENTS[1:2]), fake_embedder, chunk_index)

        # Act
        await indexer.areindex()

        # Assert
        assert fake_embedder.document_calls == [
            ["[Reference Article: docs/codex/resonance, Part 1/1]\n\nResonance amplifies."]
        ]
        hits = await chunk_index.atext_search("resonance", k=1)
        assert hits[0].chunk.content == "Resonance amplifies."

    @pytest.mark.asyncio
    async def test_embedding_failure_should_skip_only_that_document(
        self, fake_embedder, chunk_index
    ) -> None:
        # Arrange
        fake_embedder.failing_texts = {"Resonance"}
        indexer = make_indexer(FakeContentSource(DOCUMENTS), fake_embedder, chunk_index)

        # Act
        report = await indexer.areindex()

        # Assert
        assert report.documents_skipped == 1
        assert report.documents_processed == 2
        assert await chunk_index.atext_search("resonance", k=5) == []
        assert chunk_index.count() == 2

    @pytest.mark.asyncio
    async def test_embeddings_should_be_requested_in_batches(self, fake_embedder, chunk_index) -> None:
        # Arrange
        document = ContentDocument(slug="journal/long", content="\n\n".join(f"part {i} words" for i in range(5)))
        indexer = make_indexer(FakeContentSource([document]), fake_embedder, chunk_index, chunk_size=12)

        # Act
        report = await indexer.areindex()

        # Assert
        assert report.chunks_created == 5
        assert [len(batch) for batch in fake_embedder.document_calls] == [2, 2, 1]

    @pytest.mark.asyncio
    async def test_malformed_vectors_should_skip_document(self, chunk_index) -> None:
        # Arrange
        indexer = make_indexer(FakeContentSource(DOCUMENTS[:1]), NonFiniteEmbedder(), chunk_index)

        # Act
        report = await indexer.areindex()

        # Assert
        assert report.documents_skipped == 1
        assert chunk_index.count() == 0

    @pytest.mark.asyncio
    async def test_source_failure_should_keep_existing_index(self, fake_embedder, populated_index) -> None:
        # Arrange
        before = populated_index.generation_id
        indexer = make_indexer(FailingContentSource(), fake_embedder, populated_index)

        # Act / Assert
        with pytest.raises(ContentSourceError):
            await indexer.areindex()
        assert populated_index.generation_id == before
        assert not indexer.is_running

    @pytest.mark.asyncio
    async def test_concurrent_reindex_should_be_rejected(self, fake_embedder, chunk_index) -> None:
        # Arrange
        source = SlowContentSource(DOCUMENTS)
        indexer = make_indexer(source, fake_embedder, chunk_index)
        first = asyncio.create_task(indexer.areindex())
        await asyncio.sleep(0)

        # Act / Assert
        assert indexer.is_running
        with pytest.raises(ReindexInProgressError):
            await indexer.areindex()
        source.release.set()
        report = await first
        assert report.documents_processed == 3


class TestEmbedBatchRetry:
    """Test suite for embedding retries."""

    @pytest.mark.asyncio
    async def test_transient_failure_should_be_retried(self, chunk_index, monkeypatch) -> None:
        # Arrange
        embedder = FakeEmbedder()
        original = embedder.aembed_documents
        failures = {"left": 1}

        async def flaky(texts):
            if failures["left"]:
                failures["left"] -= 1
                raise EmbeddingError("rate limited")
            return await original(texts)

        embedder.aembed_documents = flaky
        indexer = CorpusIndexer(
            FakeContentSource(DOCUMENTS[1:2]),
            ParagraphChunker(),
            embedder,
            chunk_index,
            max_attempts=2,
        )
        monkeypatch.setattr(asyncio, "sleep", _no_sleep)

        # Act
        report = await indexer.areindex()

        # Assert
        assert report.documents_processed == 1
        assert chunk_index.count() == 1

