"""
Gemini embedding client.

Adapts FixedDimensionEmbeddings to the async EmbeddingClient interface.
The LangChain embeddings are synchronous, so calls run in the thread pool.

Dependencies: langchain_google_genai, fastapi.concurrency, ivy.configs
System role: Query and corpus embedding provider
"""

import logging

from fastapi.concurrency import run_in_threadpool

from ivy.boundary.llm.embeddings_wrapper import FixedDimensionEmbeddings
from ivy.configs.llm import LLMSettings
from ivy.configs.vector_store import VectorStoreSettings
from ivy.core.exceptions import ConfigurationError, EmbeddingError

logger = logging.getLogger(__name__)


class GeminiEmbeddingClient:
    """EmbeddingClient backed by Google Generative AI embeddings."""

    def __init__(
        self,
        model: str,
        dimension: int,
        api_key: str | None = None,
    ) -> None:
        """
        Initialize client. The provider client is created on first use.

        Args:
            model: Google embedding model ID
            dimension: Expected vector length
            api_key: Google API key
        """
        self._model = model
        self._dimension = dimension
        self._api_key = api_key
        self._embeddings: FixedDimensionEmbeddings | None = None

    @classmethod
    def from_settings(
        cls,
        llm_settings: LLMSettings,
        vector_settings: VectorStoreSettings,
    ) -> "GeminiEmbeddingClient":
        """Build the client from configuration."""
        return cls(
            model=vector_settings.embedding_model,
            dimension=vector_settings.embedding_dimension,
            api_key=llm_settings.google_api_key,
        )

    def _get_embeddings(self) -> FixedDimensionEmbeddings:
        """
        Get or create the LangChain embeddings.

        Raises:
            ConfigurationError: No Google API key configured
        """
        if not self._api_key:
            raise ConfigurationError(
                "Google API key is not configured",
                setting="LLM_GOOGLE_API_KEY",
            )
        if self._embeddings is None:
            self._embeddings = FixedDimensionEmbeddings(
                model=self._model,
                output_dimensionality=self._dimension,
                google_api_key=self._api_key,
            )
        return self._embeddings

    @property
    def dimension(self) -> int:
        return self._dimension

    async def aembed_query(self, text: str) -> list[float]:
        """
        Embed a search query.

        Raises:
            ConfigurationError: No Google API key configured
            EmbeddingError: Provider call failed
        """
        embeddings = self._get_embeddings()
        try:
            return await run_in_threadpool(embeddings.embed_query, text)
        except Exception as e:
            raise EmbeddingError(
                f"Query embedding failed: {type(e).__name__}",
                details={"text_length": len(text)},
            ) from e

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        """
        Embed a batch of corpus chunks.

        Raises:
            ConfigurationError: No Google API key configured
            EmbeddingError: Provider call failed
        """
        if not texts:
            return []
        embeddings = self._get_embeddings()
        try:
            return await run_in_threadpool(
                embeddings.embed_documents, texts, batch_size=len(texts)
            )
        except Exception as e:
            raise EmbeddingError(
                f"Document embedding failed: {type(e).__name__}",
                details={"batch_size": len(texts)},
            ) from e
