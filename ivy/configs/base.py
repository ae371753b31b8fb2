"""
Shared settings base for every Ivy configuration section.

Each section (session, llm, vector store, content, database) subclasses
BaseSettings with its own env_prefix. The fields declared here carry
explicit aliases, which pydantic-settings reads without that prefix,
so ENVIRONMENT and LOG_LEVEL apply to every section.

Dependencies: pydantic, pydantic_settings
System role: Foundation for all configuration classes
"""

from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

Environment = Literal["development", "test", "staging", "production"]


class BaseSettings(PydanticBaseSettings):
    """Fields common to the API process and the re-index CLI."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(
        default="development",
        validation_alias=AliasChoices("environment", "ENVIRONMENT"),
        description="Deployment the process runs in; production forces Secure cookies",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("log_level", "LOG_LEVEL"),
        description="Root log level name",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
