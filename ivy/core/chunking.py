"""
Paragraph-packing text splitter for corpus documents.

Packs blank-line separated paragraphs into chunks of at most chunk_size
characters and carries the trailing words of each chunk into the next
one. A paragraph too long to fit on its own is cut into fixed word
windows instead.

Dependencies: langchain_text_splitters
System role: Chunking stage of the corpus re-index
"""

import re

from langchain_text_splitters import TextSplitter

from ivy.core.citation import document_type

PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n+")
PARAGRAPH_SEPARATOR = "\n\n"


class ParagraphChunker(TextSplitter):
    """Split Markdown bodies on paragraph boundaries with word overlap."""

    def __init__(
        self,
        chunk_size: int = 2000,
        overlap_words: int = 50,
        fallback_window_words: int = 200,
        **kwargs,
    ) -> None:
        """
        Initialize chunker.

        Args:
            chunk_size: Maximum packed chunk size in characters
            overlap_words: Trailing words repeated at the start of the next chunk
            fallback_window_words: Window size for paragraphs longer than chunk_size
        """
        super().__init__(chunk_size=chunk_size, chunk_overlap=0, **kwargs)
        self._overlap_words = overlap_words
        self._window_words = fallback_window_words

    def _windows(self, paragraph: str) -> list[str]:
        words = paragraph.split()
        return [
            " ".join(words[i:i + self._window_words])
            for i in range(0, len(words), self._window_words)
        ]

    def _overlap(self, chunk: str, budget: int) -> str:
        """Trailing words of chunk, fewer if they would not fit in budget characters."""
        if self._overlap_words <= 0:
            return ""
        words = chunk.split()[-self._overlap_words:]
        while words and len(" ".join(words)) > budget:
            words = words[1:]
        return " ".join(words)

    @staticmethod
    def _join(head: str, paragraph: str) -> str:
        return f"{head}{PARAGRAPH_SEPARATOR}{paragraph}" if head else paragraph

    def split_text(self, text: str) -> list[str]:
        """
        Split a document body into chunks.

        Args:
            text: Document body without front matter

        Returns:
            list[str]: Chunks in document order, empty for blank text
        """
        chunks: list[str] = []
        current = ""

        for paragraph in PARAGRAPH_BREAK_RE.split(text):
            paragraph = paragraph.strip()
            if not paragraph:
                continue

            packed = self._join(current, paragraph)
            if len(packed) <= self._chunk_size:
                current = packed
                continue

            if current:
                chunks.append(current.strip())
                if len(paragraph) <= self._chunk_size:
                    budget = self._chunk_size - len(paragraph) - len(PARAGRAPH_SEPARATOR)
                    current = self._join(self._overlap(current, budget), paragraph)
                    continue

            chunks.extend(self._windows(paragraph))
            current = ""

        if current.strip():
            chunks.append(current.strip())
        return chunks


def provenance_header(slug: str, chunk_index: int, total: int) -> str:
    """
    Header prefixed to a chunk before it is embedded.

    Example:
        [Journal Entry: journal/finding-flow, Part 2/5]
    """
    return f"[{document_type(slug)}: {slug}, Part {chunk_index + 1}/{total}]"


def embedding_text(slug: str, chunk_index: int, total: int, content: str) -> str:
    """Chunk text as sent to the embedding model."""
    return f"{provenance_header(slug, chunk_index, total)}\n\n{content}"
