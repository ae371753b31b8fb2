"""
Full-text inverted index over chunk content.

Built alongside the vector index on every re-index and stored in the same
generation directory. Ranks with BM25 and reports a distance so results
sort the same way as vector hits (lower = better).

Dependencies: pydantic
System role: Keyword search over the indexed corpus
"""

import math
import re
from collections import Counter

from pydantic import BaseModel, Field

_TOKEN_RE = re.compile(r"[a-z0-9]+(?:'[a-z]+)?")

STOP_WORDS = frozenset(
    """a an and are as at be but by for from has have he her his i if in into is it its
    me my not of on or our she so than that the their them then there these they this
    to was we were what when where which who will with you your""".split()
)

BM25_K1 = 1.2
BM25_B = 0.75


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens with English stop words removed."""
    return [t for t in _TOKEN_RE.findall(text.lower()) if t not in STOP_WORDS]


class TextIndex(BaseModel):
    """
    Inverted index mapping terms to per-chunk term frequencies.

    Positions refer to the order chunks were added, which is the order of
    the generation's chunk list.

    Attributes:
        postings: term -> {position: term frequency}
        lengths: token count per position
    """

    postings: dict[str, dict[int, int]] = Field(default_factory=dict)
    lengths: list[int] = Field(default_factory=list)

    @classmethod
    def build(cls, texts: list[str]) -> "TextIndex":
        index = cls()
        for position, text in enumerate(texts):
            tokens = tokenize(text)
            index.lengths.append(len(tokens))
            for term, freq in Counter(tokens).items():
                index.postings.setdefault(term, {})[position] = freq
        return index

    def __len__(self) -> int:
        return len(self.lengths)

    def search(self, query: str, k: int) -> list[tuple[int, float]]:
        """
        Rank positions matching any query term.

        Args:
            query: Free text query
            k: Maximum number of hits

        Returns:
            list[tuple[int, float]]: (position, distance) ascending by distance
        """
        terms = set(tokenize(query))
        if not terms or not self.lengths or k <= 0:
            return []

        total = len(self.lengths)
        avg_length = (sum(self.lengths) / total) or 1.0
        scores: dict[int, float] = {}

        for term in terms:
            postings = self.postings.get(term)
            if not postings:
                continue
            idf = math.log(1 + (total - len(postings) + 0.5) / (len(postings) + 0.5))
            for position, freq in postings.items():
                norm = BM25_K1 * (1 - BM25_B + BM25_B * self.lengths[position] / avg_length)
                scores[position] = scores.get(position, 0.0) + idf * freq * (BM25_K1 + 1) / (freq + norm)

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))[:k]
        return [(position, 1.0 / (1.0 + score)) for position, score in ranked]
