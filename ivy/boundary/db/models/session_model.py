"""
Chat session ORM model.

One row per session identifier holding the message window, the running
summary, activity timestamps and a version counter for optimistic writes.

Dependencies: sqlalchemy, ivy.boundary.db.base
System role: Session persistence for conversational memory
"""

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ivy.boundary.db.base import Base, TimestampMixin


class ChatSessionModel(Base, TimestampMixin):
    """
    Chat session ORM model.

    Attributes:
        session_id: Opaque client-presented identifier (primary key)
        messages: JSON list of serialized messages in insertion order
        summary: Running summary of compacted turns
        version: Incremented on every write; writers must present the version they read
        created_at: Session creation timestamp (UTC)
        last_active: Last write timestamp (UTC)
    """

    __tablename__ = "chat_sessions"

    session_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    messages: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Serialized message window",
    )
    summary: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
