"""
FAISS chunk index with atomic generation swaps.

Each re-index builds a complete generation (FAISS vector index plus the
full-text index) and only then makes it current. On disk a generation is
a directory under <index_dir>/generations and the CURRENT file names the
live one; it is rewritten with os.replace so readers never see a partial
index. With persist=False generations live in memory only.

Dependencies: faiss-cpu, langchain_community, langchain_core, fastapi.concurrency
System role: Vector and full-text search over corpus chunks
"""

import json
import logging
import os
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path

import faiss
from fastapi.concurrency import run_in_threadpool
from langchain_community.docstore.in_memory import InMemoryDocstore
from langchain_community.vectorstores import FAISS
from langchain_core.embeddings import Embeddings

from ivy.boundary.vdb.text_index import TextIndex
from ivy.core.exceptions import VectorStoreError
from ivy.models.chunk import Chunk, ScoredChunk

logger = logging.getLogger(__name__)

CURRENT_FILE = "CURRENT"
GENERATIONS_DIR = "generations"
FAISS_INDEX_NAME = "index"
TEXT_INDEX_FILE = "text_index.json"
MANIFEST_FILE = "manifest.json"


class PrecomputedVectors(Embeddings):
    """
    Embeddings placeholder for a FAISS store searched by vector only.

    Query and corpus vectors are produced by the EmbeddingClient before they
    reach the index, so text embedding through FAISS is an error.
    """

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        raise VectorStoreError("Chunk index expects precomputed vectors", operation="embed")

    def embed_query(self, text: str) -> list[float]:
        raise VectorStoreError("Chunk index expects precomputed vectors", operation="embed")


@dataclass(frozen=True)
class IndexGeneration:
    """One immutable, fully built index."""

    generation_id: str
    dimension: int
    store: FAISS | None
    text_index: TextIndex
    chunks: tuple[Chunk, ...]

    @property
    def count(self) -> int:
        return len(self.chunks)


def _metadata(chunk: Chunk, position: int) -> dict:
    return {"slug": chunk.slug, "chunk_index": chunk.chunk_index, "position": position}


class FaissChunkIndex:
    """
    ChunkIndex backed by LangChain FAISS (IndexFlatL2).

    Distances are squared L2, so smaller means more similar.
    """

    def __init__(
        self,
        index_dir: str | Path,
        dimension: int,
        persist: bool = True,
    ) -> None:
        """
        Initialize index and load the current generation if one exists.

        Args:
            index_dir: Root directory for generations
            dimension: Embedding dimensionality chunks must have
            persist: Write generations to disk
        """
        self._root = Path(index_dir)
        self._dimension = dimension
        self._persist = persist
        self._embeddings = PrecomputedVectors()
        self._generation = self._empty_generation("empty")

        if persist:
            self._root.mkdir(parents=True, exist_ok=True)
            self._load_current()

    def _empty_generation(self, generation_id: str) -> IndexGeneration:
        return IndexGeneration(
            generation_id=generation_id,
            dimension=self._dimension,
            store=None,
            text_index=TextIndex(),
            chunks=(),
        )

    @property
    def dimension(self) -> int | None:
        return self._generation.dimension

    @property
    def generation_id(self) -> str:
        return self._generation.generation_id

    def count(self) -> int:
        return self._generation.count

    async def acount(self) -> int:
        """Chunk count of the generation CURRENT names, reloading it if another process swapped it."""
        if self._persist:
            await run_in_threadpool(self._load_current)
        return self._generation.count

    def _read_current_id(self) -> str | None:
        try:
            return (self._root / CURRENT_FILE).read_text(encoding="utf-8").strip() or None
        except FileNotFoundError:
            return None

    def _load_current(self) -> None:
        """Load the generation named by CURRENT; keep the existing one on failure."""
        generation_id = self._read_current_id()
        if generation_id is None or generation_id == self._generation.generation_id:
            return
        try:
            self._generation = self._load_generation(generation_id)
            logger.info(
                f"{__name__}:_load_current - Loaded generation {generation_id} "
                f"({self._generation.count} chunks)"
            )
        except Exception as e:
            logger.error(
                f"{__name__}:_load_current - Failed to load generation {generation_id}: "
                f"{type(e).__name__}: {e}"
            )

    def _load_generation(self, generation_id: str) -> IndexGeneration:
        path = self._root / GENERATIONS_DIR / generation_id
        manifest = json.loads((path / MANIFEST_FILE).read_text(encoding="utf-8"))
        text_index = TextIndex.model_validate_json(
            (path / TEXT_INDEX_FILE).read_text(encoding="utf-8")
        )
        chunks = tuple(Chunk.model_validate(item) for item in manifest["chunks"])

        store = None
        if chunks:
            store = FAISS.load_local(
                str(path),
                self._embeddings,
                index_name=FAISS_INDEX_NAME,
                allow_dangerous_deserialization=True,
            )
        return IndexGeneration(
            generation_id=generation_id,
            dimension=manifest["dimension"],
            store=store,
            text_index=text_index,
            chunks=chunks,
        )

    def _write_generation(self, generation: IndexGeneration) -> None:
        path = self._root / GENERATIONS_DIR / generation.generation_id
        path.mkdir(parents=True, exist_ok=False)

        if generation.store is not None:
            generation.store.save_local(str(path), index_name=FAISS_INDEX_NAME)
        (path / TEXT_INDEX_FILE).write_text(generation.text_index.model_dump_json(), encoding="utf-8")
        manifest = {
            "dimension": generation.dimension,
            # Embeddings live in the FAISS file only
            "chunks": [c.model_dump(exclude={"embedding"}) for c in generation.chunks],
        }
        (path / MANIFEST_FILE).write_text(json.dumps(manifest), encoding="utf-8")

        pointer = self._root / f"{CURRENT_FILE}.tmp"
        pointer.write_text(generation.generation_id, encoding="utf-8")
        os.replace(pointer, self._root / CURRENT_FILE)

    def _remove_stale_generations(self, keep: str) -> None:
        generations = self._root / GENERATIONS_DIR
        for path in generations.iterdir():
            if path.is_dir() and path.name != keep:
                try:
                    shutil.rmtree(path)
                except OSError as e:
                    logger.warning(
                        f"{__name__}:_remove_stale_generations - Could not remove {path.name}: {e}"
                    )

    def _build_generation(self, chunks: list[Chunk]) -> IndexGeneration:
        generation_id = uuid.uuid4().hex
        if not chunks:
            return self._empty_generation(generation_id)

        seen: set[tuple[str, int]] = set()
        for chunk in chunks:
            if chunk.key in seen:
                raise VectorStoreError(
                    f"Duplicate chunk key {chunk.chunk_id}",
                    operation="replace",
                )
            seen.add(chunk.key)
            if chunk.embedding is None or len(chunk.embedding) != self._dimension:
                raise VectorStoreError(
                    f"Chunk {chunk.chunk_id} has no embedding of dimension {self._dimension}",
                    operation="replace",
                )

        store = FAISS(
            embedding_function=self._embeddings,
            index=faiss.IndexFlatL2(self._dimension),
            docstore=InMemoryDocstore(),
            index_to_docstore_id={},
        )
        store.add_embeddings(
            text_embeddings=[(c.content, list(c.embedding)) for c in chunks],
            metadatas=[_metadata(c, i) for i, c in enumerate(chunks)],
            ids=[c.chunk_id for c in chunks],
        )
        return IndexGeneration(
            generation_id=generation_id,
            dimension=self._dimension,
            store=store,
            text_index=TextIndex.build([c.content for c in chunks]),
            chunks=tuple(c.model_copy(update={"embedding": None}) for c in chunks),
        )

    def _replace_all(self, chunks: list[Chunk]) -> IndexGeneration:
        generation = self._build_generation(chunks)
        if self._persist:
            self._write_generation(generation)
            self._remove_stale_generations(keep=generation.generation_id)
        return generation

    async def areplace_all(self, chunks: list[Chunk]) -> None:
        """
        Atomically replace the whole index.

        Args:
            chunks: Complete chunk set of the new generation, with embeddings

        Raises:
            VectorStoreError: Invalid chunk set or persistence failure; the
                previous generation stays current
        """
        try:
            generation = await run_in_threadpool(self._replace_all, chunks)
        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(
                f"Index replacement failed: {type(e).__name__}: {e}",
                operation="replace",
            ) from e

        self._generation = generation
        logger.info(
            f"{__name__}:areplace_all - Generation {generation.generation_id} is current "
            f"({generation.count} chunks)"
        )

    def _search(self, generation: IndexGeneration, embedding: list[float], k: int) -> list[ScoredChunk]:
        results = generation.store.similarity_search_with_score_by_vector(embedding, k=k)
        return [
            ScoredChunk(chunk=generation.chunks[doc.metadata["position"]], distance=float(score))
            for doc, score in results
        ]

    async def asearch(self, embedding: list[float], k: int) -> list[ScoredChunk]:
        """
        k-nearest chunks to embedding.

        Raises:
            VectorStoreError: Dimension mismatch or FAISS failure
        """
        if self._persist:
            await run_in_threadpool(self._load_current)

        generation = self._generation
        if generation.store is None or k <= 0:
            return []
        if len(embedding) != generation.dimension:
            raise VectorStoreError(
                f"Query dimension {len(embedding)} != index dimension {generation.dimension}",
                operation="search",
            )
        try:
            return await run_in_threadpool(self._search, generation, embedding, k)
        except Exception as e:
            raise VectorStoreError(
                f"Search failed: {type(e).__name__}: {e}",
                operation="search",
            ) from e

    async def atext_search(self, query: str, k: int) -> list[ScoredChunk]:
        """Keyword search over the current generation."""
        if self._persist:
            await run_in_threadpool(self._load_current)

        generation = self._generation
        hits = generation.text_index.search(query, k)
        return [
            ScoredChunk(chunk=generation.chunks[position], distance=distance)
            for position, distance in hits
        ]
