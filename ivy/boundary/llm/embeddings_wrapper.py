"""
Gemini embeddings pinned to the chunk index's vector length.

GoogleGenerativeAIEmbeddings only honours output_dimensionality per call,
so a bare instance returns full-size vectors that the index rejects. This
subclass supplies the configured length and the retrieval task type on
every call: RETRIEVAL_DOCUMENT for corpus chunks, RETRIEVAL_QUERY for
user turns.

Dependencies: langchain_google_genai
System role: Embedding dimension consistency for the chunk index
"""

import logging

from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)

DOCUMENT_TASK = "RETRIEVAL_DOCUMENT"
QUERY_TASK = "RETRIEVAL_QUERY"


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    _output_dimensionality: int = 1024

    def __init__(self, model: str = "models/gemini-embedding-001", output_dimensionality: int = 1024, **kwargs) -> None:
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(f"{__name__}:__init__ - {model} pinned to {output_dimensionality} dimensions")

    @property
    def output_dimensionality(self) -> int:
        return self._output_dimensionality

    def embed_documents(self, texts: list[str], **kwargs) -> list[list[float]]:
        kwargs.setdefault("task_type", DOCUMENT_TASK)
        kwargs["output_dimensionality"] = kwargs.get("output_dimensionality") or self._output_dimensionality
        return super().embed_documents(texts, **kwargs)

    def embed_query(self, text: str, **kwargs) -> list[float]:
        kwargs.setdefault("task_type", QUERY_TASK)
        kwargs["output_dimensionality"] = kwargs.get("output_dimensionality") or self._output_dimensionality
        return super().embed_query(text, **kwargs)
