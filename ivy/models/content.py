"""
Corpus document and re-index report models.

Dependencies: pydantic
System role: Re-index pipeline data structures
"""

from pydantic import BaseModel, Field


class ContentDocument(BaseModel):
    """Source document fetched from the content store, front-matter removed."""

    slug: str = Field(description="Path-derived identifier without extension")
    content: str = Field(description="Markdown body")


class ReindexReport(BaseModel):
    """Outcome of a corpus re-index."""

    documents_fetched: int = 0
    documents_processed: int = 0
    documents_skipped: int = 0
    chunks_created: int = 0
    embedding_dimension: int | None = None
    time_taken_seconds: float = 0.0
