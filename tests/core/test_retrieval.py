"""
Test suite for RetrievalEngine.

Covers ranking order and size, the empty corpus, malformed query
embeddings, embedder failures and full-text search.

System role: Verification of semantic search over the corpus
"""

import math

import pytest

from ivy.boundary.vdb.faiss_chunk_index import FaissChunkIndex
from ivy.core.retrieval import RetrievalEngine, is_valid_vector, rank
from ivy.models.chunk import Chunk, ScoredChunk
from tests.fakes import SAMPLE_CHUNKS, TEST_DIMENSION, FakeEmbedder, make_chunk


def scored(slug: str, distance: float) -> ScoredChunk:
    return ScoredChunk(chunk=Chunk(slug=slug, chunk_index=0, content=slug), distance=distance)


class TestVectorValidation:
    """Test suite for is_valid_vector."""

    @pytest.mark.parametrize(
        "vector",
        [
            None,
            "not a vector",
            [0.1] * (TEST_DIMENSION - 1),
            [0.1] * (TEST_DIMENSION - 1) + [math.nan],
            [0.1] * (TEST_DIMENSION - 1) + [math.inf],
            [0.1] * (TEST_DIMENSION - 1) + ["0.1"],
            [0.1] * (TEST_DIMENSION - 1) + [True],
        ],
    )
    def test_malformed_vectors_should_be_rejected(self, vector) -> None:
        assert is_valid_vector(vector, TEST_DIMENSION) is False

    def test_finite_vector_of_right_length_should_be_accepted(self) -> None:
        assert is_valid_vector([0, 1.5] + [0.0] * (TEST_DIMENSION - 2), TEST_DIMENSION) is True


class TestRank:
    """Test suite for rank."""

    def test_should_sort_ascending_and_cap_at_k(self) -> None:
        # Arrange
        items = [scored("c", 0.9), scored("a", 0.1), scored("b", 0.5)]

        # Act
        result = rank(items, 2)

        # Assert
        assert [item.chunk.slug for item in result.items] == ["a", "b"]


class TestRetrievalEngine:
    """Test suite for RetrievalEngine.aretrieve."""

    @pytest.mark.asyncio
    async def test_retrieve_should_return_closest_chunk_first(self, retrieval) -> None:
        # Act
        result = await retrieval.aretrieve("rivers follow the shape of the land", k=3)

        # Assert
        assert 0 < len(result) <= 3
        assert result.items[0].chunk.slug == "journal/finding-flow"
        assert result.items[0].chunk.chunk_index == 1
        distances = [item.distance for item in result.items]
        assert distances == sorted(distances)

    @pytest.mark.asyncio
    async def test_retrieve_should_never_return_more_than_k(self, retrieval) -> None:
        # Act
        result = await retrieval.aretrieve("flow", k=2)

        # Assert
        assert len(result) == 2

    @pytest.mark.asyncio
    async def test_k_larger_than_corpus_should_return_every_chunk(self, retrieval) -> None:
        # Act
        result = await retrieval.aretrieve("flow", k=50)

        # Assert
        assert len(result) == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("k", [0, -1])
    async def test_non_positive_k_should_return_empty(self, retrieval, k) -> None:
        assert (await retrieval.aretrieve("flow", k=k)).is_empty

    @pytest.mark.asyncio
    async def test_empty_corpus_should_return_empty_without_embedding(self, chunk_index) -> None:
        # Arrange
        embedder = FakeEmbedder(fail=True)
        engine = RetrievalEngine(embedder, chunk_index, expected_dimension=TEST_DIMENSION)

        # Act
        result = await engine.aretrieve("anything at all", k=4)

        # Assert
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_embedder_failure_should_degrade_to_empty(self, populated_index) -> None:
        # Arrange
        engine = RetrievalEngine(FakeEmbedder(fail=True), populated_index, TEST_DIMENSION)

        # Act
        result = await engine.aretrieve("flow", k=4)

        # Assert
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_non_finite_query_vector_should_degrade_to_empty(self, populated_index) -> None:
        # Arrange
        embedder = FakeEmbedder()
        embedder.bad_vector = [math.nan] * TEST_DIMENSION
        engine = RetrievalEngine(embedder, populated_index, TEST_DIMENSION)

        # Act
        result = await engine.aretrieve("flow", k=4)

        # Assert
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_dimension_mismatch_should_degrade_to_empty(self, populated_index) -> None:
        # Arrange
        engine = RetrievalEngine(FakeEmbedder(dimension=8), populated_index, TEST_DIMENSION)

        # Act
        result = await engine.aretrieve("flow", k=4)

        # Assert
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_index_built_by_another_process_should_be_searched(self, tmp_path, fake_embedder) -> None:
        """A server started on an empty index directory sees a later re-index."""
        # Arrange
        serving = FaissChunkIndex(tmp_path, dimension=TEST_DIMENSION)
        engine = RetrievalEngine(fake_embedder, serving, TEST_DIMENSION)
        assert (await engine.aretrieve("flow", k=4)).is_empty
        reindexer = FaissChunkIndex(tmp_path, dimension=TEST_DIMENSION)

        # Act
        await reindexer.areplace_all([make_chunk(*row) for row in SAMPLE_CHUNKS])
        result = await engine.aretrieve("flow", k=4)

        # Assert
        assert len(result) == 4

    @pytest.mark.asyncio
    async def test_blank_query_should_return_empty(self, retrieval) -> None:
        assert (await retrieval.aretrieve("   ", k=4)).is_empty


class TestRetrievalTextSearch:
    """Test suite for RetrievalEngine.atext_search."""

    @pytest.mark.asyncio
    async def test_text_search_should_match_keywords(self, retrieval) -> None:
        # Act
        result = await retrieval.atext_search("resonance", k=4)

        # Assert
        assert [item.chunk.slug for item in result.items] == ["docs/codex/resonance"]

    @pytest.mark.asyncio
    async def test_text_search_without_matches_should_return_empty(self, retrieval) -> None:
        assert (await retrieval.atext_search("zebra", k=4)).is_empty


class TestGroundingBlock:
    """Test suite for context formatting helpers."""

    def test_grounding_instructions_should_embed_context(self) -> None:
        # Act
        text = RetrievalEngine.grounding_instructions("PASSAGES")

        # Assert
        assert "PASSAGES" in text
        assert "do not quote them verbatim" in text
