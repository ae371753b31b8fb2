"""
Session store configuration settings.

Conversation window, compaction trigger, idle timeout and cookie settings.

Dependencies: pydantic, pydantic_settings
System role: Conversational memory configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ivy.configs.base import BaseSettings


class SessionSettings(BaseSettings):
    """Conversational memory configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SESSION_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="memory",
        description="Session persistence: 'memory' for a single process, 'sql' for a database",
    )
    window_size: int = Field(
        default=20,
        ge=1,
        description="Number of most recent messages kept verbatim",
    )
    compaction_word_threshold: int = Field(
        default=1500,
        ge=1,
        description="Approximate transcript size (words) that triggers summarization",
    )
    timeout_minutes: int = Field(
        default=30,
        ge=1,
        description="Idle minutes after which a session is treated as absent",
    )
    sweep_interval_seconds: int = Field(
        default=300,
        ge=1,
        description="Interval between background sweeps of expired sessions",
    )
    max_write_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts for a session write that hits a concurrent modification",
    )

    cookie_name: str = Field(default="ivy_session", description="Session cookie name")
    cookie_secure: bool = Field(default=False, description="Mark the session cookie Secure outside production too")

    @property
    def cookie_is_secure(self) -> bool:
        return self.cookie_secure or self.is_production

    @property
    def timeout_seconds(self) -> int:
        """Idle timeout expressed in seconds."""
        return self.timeout_minutes * 60
