"""
Chunk provenance formatting.

Infers the document type from a slug prefix and renders a readable
citation, then formats retrieved chunks into the grounding block.

Dependencies: ivy.models.chunk
System role: Citation formatting business logic
"""

from ivy.models.chunk import RetrievalResult, ScoredChunk

CONTEXT_SEPARATOR = "\n\n---\n\n"

JOURNAL_ENTRY = "Journal Entry"
BOOK_CHAPTER = "Book Chapter"
REFERENCE_ARTICLE = "Reference Article"
DOCUMENT = "Document"


def document_type(slug: str) -> str:
    """
    Infer the document type from the slug prefix.

    Args:
        slug: Chunk source identifier

    Returns:
        str: Journal Entry, Book Chapter, Reference Article or Document
    """
    if slug.startswith("journal/"):
        return JOURNAL_ENTRY
    if slug.startswith("books/"):
        return BOOK_CHAPTER
    if slug.startswith("docs/"):
        return REFERENCE_ARTICLE
    return DOCUMENT


def to_title(slug_part: str) -> str:
    """Turn 'finding-flow' into 'Finding Flow'."""
    return " ".join(word[:1].upper() + word[1:] for word in slug_part.split("-") if word)


def format_citation(slug: str) -> str:
    """
    Render a human-readable citation for a slug.

    Examples:
        journal/finding-flow -> journal entry "Finding Flow"
        books/the-field/chapter-one -> The Field, Chapter One
        docs/codex/resonance -> codex article "Resonance"
    """
    parts = slug.split("/")
    if slug.startswith("journal/"):
        return f'journal entry "{to_title(parts[1] if len(parts) > 1 else "")}"'
    if slug.startswith("books/"):
        book = to_title(parts[1] if len(parts) > 1 else "")
        chapter = to_title(parts[2] if len(parts) > 2 else "")
        return f"{book}, {chapter}" if chapter else book
    if slug.startswith("docs/codex/"):
        return f'codex article "{to_title(parts[2] if len(parts) > 2 else "")}"'
    if slug.startswith("docs/"):
        return f'reference article "{to_title(parts[-1])}"'
    return to_title(parts[-1])


def format_chunk(item: ScoredChunk, position: int) -> str:
    """Render one retrieved chunk with its 1-based position and provenance."""
    chunk = item.chunk
    header = (
        f"[Source {position}: {document_type(chunk.slug)} - "
        f"{format_citation(chunk.slug)}, part {chunk.chunk_index + 1}]"
    )
    return f"{header}\n{chunk.content.strip()}"


def format_context(result: RetrievalResult) -> str:
    """
    Format retrieval results into one grounding block.

    Args:
        result: Ranked retrieval result

    Returns:
        str: Formatted block, empty string when result is empty
    """
    return CONTEXT_SEPARATOR.join(
        format_chunk(item, position)
        for position, item in enumerate(result.items, start=1)
    )
