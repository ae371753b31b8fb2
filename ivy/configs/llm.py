"""
Completion model configuration settings.

Primary and fallback chat models, sampling temperature and output budgets.

Dependencies: pydantic, pydantic_settings
System role: LLM configuration for replies and summaries
"""

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from ivy.configs.base import BaseSettings


class LLMSettings(BaseSettings):
    """Chat completion configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LLM_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
        description="Google Generative AI API key (falls back to GOOGLE_API_KEY)",
    )
    chat_model: str = Field(default="gemini-2.5-flash", description="Primary chat model")
    fallback_model: str | None = Field(
        default="gemini-2.5-flash-lite",
        description="Model tried once when the primary model fails (empty disables)",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")

    grounded_max_tokens: int = Field(
        default=500,
        description="Output budget when grounding context is present",
    )
    ungrounded_max_tokens: int = Field(
        default=150,
        description="Output budget for replies without grounding context",
    )
    summary_max_tokens: int = Field(
        default=300,
        description="Output budget for conversation summaries",
    )

    persona_name: str = Field(default="Ivy", description="Assistant persona name")
