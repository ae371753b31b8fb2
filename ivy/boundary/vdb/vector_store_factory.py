"""
Factories for the chunk index and embedding client.

Dependencies: ivy.boundary.vdb, ivy.boundary.llm, ivy.configs
System role: Search backend instantiation from configuration
"""

import logging

from ivy.boundary.llm.gemini_embedder import GeminiEmbeddingClient
from ivy.boundary.vdb.faiss_chunk_index import FaissChunkIndex
from ivy.configs.settings import Settings

logger = logging.getLogger(__name__)


def get_chunk_index(settings: Settings) -> FaissChunkIndex:
    """
    Create the chunk index from settings.

    Args:
        settings: Application settings

    Returns:
        FaissChunkIndex: Index with the current generation loaded
    """
    vs = settings.vector_store
    logger.info(
        f"{__name__}:get_chunk_index - Creating FAISS chunk index "
        f"(dir={vs.index_dir}, persist={vs.persist}, dimension={vs.embedding_dimension})"
    )
    return FaissChunkIndex(
        index_dir=vs.index_dir,
        dimension=vs.embedding_dimension,
        persist=vs.persist,
    )


def get_embedding_client(settings: Settings) -> GeminiEmbeddingClient:
    """Create the embedding client from settings."""
    logger.info(
        f"{__name__}:get_embedding_client - Creating embedding client "
        f"(model={settings.vector_store.embedding_model})"
    )
    return GeminiEmbeddingClient.from_settings(settings.llm, settings.vector_store)
