"""
Test suite for ParagraphChunker and chunk provenance headers.

System role: Verification of the re-index chunking stage
"""

from ivy.core.chunking import ParagraphChunker, embedding_text, provenance_header


class TestParagraphChunker:
    """Test suite for ParagraphChunker.split_text."""

    def test_blank_text_should_produce_no_chunks(self) -> None:
        assert ParagraphChunker().split_text("  \n\n  ") == []

    def test_short_paragraphs_should_pack_into_one_chunk(self) -> None:
        # Arrange
        text = "First paragraph.\n\nSecond paragraph.\n\n\nThird paragraph."

        # Act
        chunks = ParagraphChunker(chunk_size=200).split_text(text)

        # Assert
        assert chunks == ["First paragraph.\n\nSecond paragraph.\n\nThird paragraph."]

    def test_overflow_should_start_new_chunk_with_word_overlap(self) -> None:
        # Arrange
        first = "alpha beta gamma delta"
        second = "epsilon zeta eta theta"
        chunker = ParagraphChunker(chunk_size=30, overlap_words=2)

        # Act
        chunks = chunker.split_text(f"{first}\n\n{second}")

        # Assert
        assert chunks == [first, f"delta\n\n{second}"]

    def test_packed_chunks_should_fit_chunk_size_including_overlap(self) -> None:
        """Separators and carried words count toward the size limit."""
        # Arrange
        paragraphs = [" ".join(f"p{n}w{i}" for i in range(5)) for n in range(12)]
        chunker = ParagraphChunker(chunk_size=60, overlap_words=3)

        # Act
        chunks = chunker.split_text("\n\n".join(paragraphs))

        # Assert
        assert len(chunks) > 1
        assert all(len(chunk) <= 60 for chunk in chunks)
        assert chunks[1].split()[:3] == chunks[0].split()[-3:]

    def test_zero_overlap_should_not_repeat_words(self) -> None:
        # Act
        chunks = ParagraphChunker(chunk_size=30, overlap_words=0).split_text(
            "alpha beta gamma delta\n\nepsilon zeta eta theta"
        )

        # Assert
        assert chunks == ["alpha beta gamma delta", "epsilon zeta eta theta"]

    def test_oversized_paragraph_should_split_into_word_windows(self) -> None:
        # Arrange
        words = [f"w{i}" for i in range(25)]
        chunker = ParagraphChunker(chunk_size=40, fallback_window_words=10)

        # Act
        chunks = chunker.split_text(" ".join(words))

        # Assert
        assert chunks == [
            " ".join(words[0:10]),
            " ".join(words[10:20]),
            " ".join(words[20:25]),
        ]

    def test_oversized_paragraph_after_packed_text_should_flush_first(self) -> None:
        # Arrange
        long_paragraph = " ".join(f"w{i}" for i in range(30))
        chunker = ParagraphChunker(chunk_size=40, overlap_words=1, fallback_window_words=15)

        # Act
        chunks = chunker.split_text(f"short intro\n\n{long_paragraph}\n\ntail")

        # Assert
        assert chunks[0] == "short intro"
        assert chunks[1].split() == [f"w{i}" for i in range(15)]
        assert chunks[2].split() == [f"w{i}" for i in range(15, 30)]
        assert chunks[3] == "tail"

    def test_chunks_should_never_be_empty(self) -> None:
        # Act
        chunks = ParagraphChunker(chunk_size=20).split_text("a\n\n\n\n\n\nb\n\n   \n\nc")

        # Assert
        assert all(chunk.strip() for chunk in chunks)


class TestProvenanceHeader:
    """Test suite for provenance_header and embedding_text."""

    def test_header_should_name_type_slug_and_part(self) -> None:
        assert provenance_header("journal/finding-flow", 1, 5) == "[Journal Entry: journal/finding-flow, Part 2/5]"

    def test_embedding_text_should_prefix_header(self) -> None:
        # Act
        text = embedding_text("docs/codex/resonance", 0, 1, "Body text.")

        # Assert
        assert text == "[Reference Article: docs/codex/resonance, Part 1/1]\n\nBody text."
