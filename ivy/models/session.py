"""
Session domain models.

Conversation transcript held per session identifier: ordered messages,
an optional running summary and activity timestamps.

Dependencies: pydantic
System role: Conversational memory data structures
"""

import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel):
    """Single transcript entry. Immutable once appended."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Message identifier")
    role: Role = Field(description="Message author")
    content: str = Field(description="Message text")
    timestamp: datetime = Field(default_factory=utc_now, description="Append time (UTC)")


class Session(BaseModel):
    """Server-side conversational memory for one opaque identifier."""

    session_id: str = Field(description="Opaque client-presented identifier")
    messages: list[Message] = Field(default_factory=list, description="Window in insertion order")
    summary: str | None = Field(default=None, description="Running summary of compacted turns")
    created_at: datetime = Field(default_factory=utc_now)
    last_active: datetime = Field(default_factory=utc_now)
    version: int = Field(default=0, ge=0, description="Write counter for optimistic concurrency")

    @classmethod
    def new(cls, session_id: str) -> "Session":
        """Create an empty session carrying the given identifier."""
        now = utc_now()
        return cls(session_id=session_id, created_at=now, last_active=now)

    def idle_for(self, now: datetime | None = None) -> timedelta:
        """Time elapsed since the last write."""
        return (now or utc_now()) - self.last_active

    def is_expired(self, timeout: timedelta, now: datetime | None = None) -> bool:
        """Whether the session has been idle longer than timeout."""
        return self.idle_for(now) > timeout

    def conversation(self) -> list[Message]:
        """Messages excluding synthetic system entries."""
        return [m for m in self.messages if m.role != Role.SYSTEM]
