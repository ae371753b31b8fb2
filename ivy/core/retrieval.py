"""
Retrieval engine for grounding replies in the archive.

Embeds the inbound query, searches the chunk index and returns ranked
chunks. Retrieval is best-effort: every failure degrades to an empty
result so the caller can still answer ungrounded.

Dependencies: ivy.core.interfaces, ivy.core.citation, ivy.core.prompts
System role: Semantic search over the indexed corpus
"""

import logging
import math

from ivy.core.citation import format_context
from ivy.core.interfaces import ChunkIndex, EmbeddingClient
from ivy.core.prompts import GROUNDING_SECTION
from ivy.models.chunk import RetrievalResult, ScoredChunk

logger = logging.getLogger(__name__)


def is_valid_vector(vector: object, dimension: int) -> bool:
    """Whether vector is a list of finite numbers of the given length."""
    if not isinstance(vector, (list, tuple)) or len(vector) != dimension:
        return False
    for value in vector:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value):
            return False
    return True


def rank(items: list[ScoredChunk], k: int) -> RetrievalResult:
    """Sort ascending by distance and keep at most k items."""
    ordered = sorted(items, key=lambda item: item.distance)
    return RetrievalResult(items=ordered[: max(k, 0)])


class RetrievalEngine:
    """
    Best-effort semantic retrieval over a ChunkIndex.

    The query embedding must match the dimensionality the index was built
    with; a mismatch is treated as a failure, never as a search.
    """

    def __init__(
        self,
        embedder: EmbeddingClient,
        index: ChunkIndex,
        expected_dimension: int,
    ) -> None:
        """
        Initialize retrieval engine.

        Args:
            embedder: Query embedding client
            index: Chunk index to search
            expected_dimension: Embedding dimensionality of the corpus
        """
        self.embedder = embedder
        self.index = index
        self.expected_dimension = expected_dimension

    async def aretrieve(self, query: str, k: int) -> RetrievalResult:
        """
        Retrieve the k chunks nearest to query.

        Args:
            query: Free text to search for
            k: Maximum number of chunks

        Returns:
            RetrievalResult: Chunks ascending by distance, empty on any failure
        """
        if k <= 0 or not query.strip():
            return RetrievalResult.empty()

        try:
            if await self.index.acount() == 0:
                logger.info(f"{__name__}:aretrieve - Index is empty, skipping retrieval")
                return RetrievalResult.empty()

            embedding = await self.embedder.aembed_query(query)
            if not is_valid_vector(embedding, self.expected_dimension):
                logger.warning(
                    f"{__name__}:aretrieve - Query embedding rejected "
                    f"(expected {self.expected_dimension} finite values)"
                )
                return RetrievalResult.empty()

            items = await self.index.asearch(list(embedding), k)
            result = rank(items, k)
            logger.info(
                f"{__name__}:aretrieve - Retrieved {len(result)} chunks "
                f"(query_length={len(query)}, k={k})"
            )
            return result

        except Exception as e:
            logger.warning(
                f"{__name__}:aretrieve - Retrieval failed, continuing ungrounded: "
                f"{type(e).__name__}: {e}"
            )
            return RetrievalResult.empty()

    async def atext_search(self, query: str, k: int) -> RetrievalResult:
        """
        Full-text search over the parallel text index.

        Same best-effort contract as aretrieve.
        """
        if k <= 0 or not query.strip():
            return RetrievalResult.empty()
        try:
            items = await self.index.atext_search(query, k)
            return rank(items, k)
        except Exception as e:
            logger.warning(f"{__name__}:atext_search - Text search failed: {type(e).__name__}: {e}")
            return RetrievalResult.empty()

    @staticmethod
    def format_context(result: RetrievalResult) -> str:
        """Render retrieved chunks as one grounding block."""
        return format_context(result)

    @staticmethod
    def grounding_instructions(context: str) -> str:
        """Wrap a grounding block with the synthesis instructions."""
        return GROUNDING_SECTION.format(context=context)
