"""
Content corpus configuration settings.

Where the corpus is read from during re-index and how it is chunked.

Dependencies: pydantic, pydantic_settings
System role: Re-index pipeline configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ivy.configs.base import BaseSettings


class ContentSettings(BaseSettings):
    """Settings for the corpus re-index pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CONTENT_",
        case_sensitive=False,
        extra="ignore",
    )

    source_type: str = Field(
        default="local",
        description="Content store: 'local' directory or 's3' bucket",
    )
    local_dir: str = Field(default="./content", description="Root of the local content tree")
    s3_bucket: str = Field(default="ivy-content", description="S3 bucket holding the corpus")
    s3_prefix: str = Field(default="content/", description="Key prefix of the content tree")
    s3_region: str = Field(default="ap-southeast-2", description="AWS region of the bucket")

    chunk_size: int = Field(default=2000, description="Maximum chunk size in characters")
    overlap_words: int = Field(
        default=50,
        description="Words carried from one chunk into the next",
    )
    fallback_window_words: int = Field(
        default=200,
        description="Word window used to split a paragraph longer than chunk_size",
    )
    embed_batch_size: int = Field(default=20, ge=1, description="Chunks per embedding call")

    reindex_token: str | None = Field(
        default=None,
        description="Shared secret required by POST /rag/refresh",
    )
