"""
Top-level Ivy settings.

One Settings object holds every configuration section plus the HTTP
server options. get_settings() caches it for the life of the process;
tests build their own instance and hand it to ServiceCache instead.

Dependencies: pydantic, ivy.configs sections
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from ivy.configs.base import BaseSettings
from ivy.configs.content import ContentSettings
from ivy.configs.database import DatabaseSettings
from ivy.configs.llm import LLMSettings
from ivy.configs.session import SessionSettings
from ivy.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Every configuration section of the assistant backend."""

    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(default=8000, description="Port uvicorn listens on")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser (JSON list)",
    )

    session: SessionSettings = Field(default_factory=SessionSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings, read from the environment and .env once."""
    return Settings()
