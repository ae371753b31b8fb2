"""
Corpus re-index service.

Fetches every document from the content store, chunks it, embeds the
chunks in batches and atomically replaces the chunk index. A document
whose embeddings cannot be produced is skipped rather than indexed with
placeholder vectors.

Dependencies: tenacity, ivy.core, ivy.boundary
System role: Corpus ingestion pipeline
"""

import asyncio
import logging
import time

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ivy.core.chunking import ParagraphChunker, embedding_text
from ivy.core.exceptions import EmbeddingError, ReindexInProgressError
from ivy.core.interfaces import ChunkIndex, ContentSource, EmbeddingClient
from ivy.core.retrieval import is_valid_vector
from ivy.models.chunk import Chunk
from ivy.models.content import ContentDocument, ReindexReport

logger = logging.getLogger(__name__)


class CorpusIndexer:
    """
    Rebuild the chunk index from the content store.

    Only one re-index runs at a time per process; a second request while
    one is running is rejected with ReindexInProgressError.
    """

    def __init__(
        self,
        source: ContentSource,
        chunker: ParagraphChunker,
        embedder: EmbeddingClient,
        index: ChunkIndex,
        batch_size: int = 20,
        max_attempts: int = 3,
    ) -> None:
        """
        Initialize indexer.

        Args:
            source: Content store to read documents from
            chunker: Paragraph chunker
            embedder: Embedding client for corpus chunks
            index: Chunk index to replace
            batch_size: Chunks per embedding call
            max_attempts: Attempts per embedding batch
        """
        self.source = source
        self.chunker = chunker
        self.embedder = embedder
        self.index = index
        self.batch_size = batch_size
        self.max_attempts = max_attempts
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed one batch with exponential backoff on provider errors."""
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(EmbeddingError),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(initial=1, max=30, jitter=2),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:_embed_batch - Retry {retry_state.attempt_number}/{self.max_attempts}"
            ),
            reraise=True,
        ):
            with attempt:
                return await self.embedder.aembed_documents(texts)
        return []

    async def build_document_chunks(self, document: ContentDocument) -> list[Chunk]:
        """
        Chunk and embed one document.

        Args:
            document: Source document

        Returns:
            list[Chunk]: Embedded chunks in document order, empty for a blank body

        Raises:
            EmbeddingError: Embedding failed or returned malformed vectors
        """
        pieces = self.chunker.split_text(document.content)
        total = len(pieces)
        texts = [embedding_text(document.slug, i, total, piece) for i, piece in enumerate(pieces)]

        vectors: list[list[float]] = []
        for start in range(0, total, self.batch_size):
            batch = texts[start:start + self.batch_size]
            embedded = await self._embed_batch(batch)
            if len(embedded) != len(batch):
                raise EmbeddingError(
                    f"Expected {len(batch)} embeddings, got {len(embedded)}",
                    details={"slug": document.slug},
                )
            vectors.extend(embedded)

        for vector in vectors:
            if not is_valid_vector(vector, self.embedder.dimension):
                raise EmbeddingError(
                    f"Embedding is not {self.embedder.dimension} finite values",
                    details={"slug": document.slug},
                )

        return [
            Chunk(slug=document.slug, chunk_index=i, content=piece, embedding=list(vector))
            for i, (piece, vector) in enumerate(zip(pieces, vectors))
        ]

    async def areindex(self) -> ReindexReport:
        """
        Rebuild the whole index.

        Returns:
            ReindexReport: Counts and timing of the run

        Raises:
            ReindexInProgressError: Another re-index is running
            ContentSourceError: Content store could not be listed
            VectorStoreError: New generation could not be written; old one stays current
        """
        if self._lock.locked():
            raise ReindexInProgressError("A re-index is already running")

        async with self._lock:
            started = time.monotonic()
            logger.info(f"{__name__}:areindex - START")

            documents = await self.source.afetch_documents()
            report = ReindexReport(
                documents_fetched=len(documents),
                embedding_dimension=self.embedder.dimension,
            )

            chunks: list[Chunk] = []
            for document in documents:
                try:
                    document_chunks = await self.build_document_chunks(document)
                except EmbeddingError as e:
                    report.documents_skipped += 1
                    logger.error(f"{__name__}:areindex - Skipping {document.slug}: {e.message}")
                    continue
                chunks.extend(document_chunks)
                report.documents_processed += 1
                logger.debug(f"{__name__}:areindex - Processed {document.slug}: {len(document_chunks)} chunks")

            await self.index.areplace_all(chunks)

            report.chunks_created = len(chunks)
            report.time_taken_seconds = round(time.monotonic() - started, 2)
            logger.info(
                f"{__name__}:areindex - END documents={report.documents_processed}/"
                f"{report.documents_fetched}, skipped={report.documents_skipped}, "
                f"chunks={report.chunks_created}, time={report.time_taken_seconds}s"
            )
            return report
