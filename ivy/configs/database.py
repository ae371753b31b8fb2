"""
SQL session store connection settings.

Only read when SESSION_STORE_TYPE=sql. Either set POSTGRES_URL to a full
async SQLAlchemy URL (sqlite+aiosqlite works for a single host) or the
individual POSTGRES_* parts for asyncpg.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for the session store
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ivy.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(default=None, description="Complete async URL; wins over the parts below")

    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = "postgres"
    db: str = "ivy"
    sslmode: str = Field(default="prefer", description="'require' adds ssl=require for asyncpg")

    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    echo_sql: bool = False

    @property
    def async_database_url(self) -> str:
        if self.url:
            return self.url
        query = "?ssl=require" if self.sslmode == "require" else ""
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}{query}"

    @property
    def is_sqlite(self) -> bool:
        """SQLite engines are built without pool sizing."""
        return self.async_database_url.startswith("sqlite")
