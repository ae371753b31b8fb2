"""
Chunk domain models.

Retrieval units keyed by (slug, chunk_index) and ranked search results.

Dependencies: pydantic
System role: Corpus chunk and retrieval result data structures
"""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """Bounded slice of a source document with its embedding."""

    slug: str = Field(description="Source document identifier, e.g. 'journal/finding-flow'")
    chunk_index: int = Field(ge=0, description="Zero-based position within the document")
    content: str = Field(description="Chunk text content")
    embedding: list[float] | None = Field(default=None, description="Embedding vector")

    @property
    def key(self) -> tuple[str, int]:
        """Unique identity of the chunk within an index generation."""
        return (self.slug, self.chunk_index)

    @property
    def chunk_id(self) -> str:
        """String form of the key, used as docstore id."""
        return f"{self.slug}#{self.chunk_index}"


class ScoredChunk(BaseModel):
    """Chunk paired with its distance to a query (lower = more similar)."""

    chunk: Chunk
    distance: float


class SourceRef(BaseModel):
    """Provenance of one retrieved chunk."""

    slug: str
    chunk_index: int


class RetrievalResult(BaseModel):
    """Ranked chunks, ascending by distance; list position is the zero-based rank."""

    items: list[ScoredChunk] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "RetrievalResult":
        return cls(items=[])

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def sources(self) -> list[SourceRef]:
        return [
            SourceRef(slug=item.chunk.slug, chunk_index=item.chunk.chunk_index)
            for item in self.items
        ]

    def __len__(self) -> int:
        return len(self.items)
