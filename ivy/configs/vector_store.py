"""
Chunk index and embedding settings.

The index lives under index_dir as one sub-directory per generation.
embedding_dimension must match what the embedding model returns; a
query vector of any other length is discarded by retrieval.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ivy.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    index_dir: str = Field(default="/tmp/.ivy_index", description="Parent directory of index generations")
    persist: bool = Field(default=True, description="Write generations to disk; False keeps them in memory")

    embedding_model: str = Field(default="models/gemini-embedding-001", description="Gemini embedding model")
    embedding_dimension: int = Field(default=1024, ge=1, description="Length of every stored and query vector")

    top_k: int = Field(default=4, ge=1, description="Passages placed in the grounding block of a chat turn")
    search_top_k: int = Field(default=8, ge=1, description="Default result count for /search")
