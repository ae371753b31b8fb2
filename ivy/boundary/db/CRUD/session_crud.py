"""
Chat session persistence on SQLAlchemy.

Implements the SessionRepository contract with optimistic concurrency:
a write succeeds only if the stored version still equals the version the
writer read, so concurrent processes cannot overwrite each other's turns.

Dependencies: sqlalchemy, pydantic, ivy.boundary.db
System role: Durable session store backend
"""

import logging
from datetime import datetime

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ivy.boundary.db.base import as_utc
from ivy.boundary.db.models.session_model import ChatSessionModel
from ivy.core.exceptions import (
    ConcurrentSessionWriteError,
    CorruptSessionRecordError,
    SessionStorageError,
)
from ivy.models.session import Message, Session

logger = logging.getLogger(__name__)

_messages_adapter = TypeAdapter(list[Message])


class SqlSessionRepository:
    """
    SessionRepository backed by the chat_sessions table.

    Every operation runs in its own short transaction.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """
        Initialize repository.

        Args:
            session_factory: Async session factory from ivy.boundary.db.connection
        """
        self._session_factory = session_factory

    @staticmethod
    def _to_domain(row: ChatSessionModel) -> Session:
        """Decode a row; any decoding problem is reported as CorruptSessionRecordError."""
        try:
            return Session(
                session_id=row.session_id,
                messages=_messages_adapter.validate_python(row.messages or []),
                summary=row.summary,
                created_at=as_utc(row.created_at),
                last_active=as_utc(row.last_active),
                version=row.version,
            )
        except (PydanticValidationError, TypeError, ValueError, AttributeError) as e:
            raise CorruptSessionRecordError(
                f"Corrupt session record: {type(e).__name__}",
                session_id=row.session_id,
            ) from e

    async def get(self, session_id: str) -> Session | None:
        """
        Load a session record.

        Args:
            session_id: Session identifier

        Returns:
            Session | None: Decoded session, None if absent

        Raises:
            CorruptSessionRecordError: Record exists but cannot be decoded
            SessionStorageError: The database could not be read
        """
        try:
            async with self._session_factory() as db:
                row = await db.get(ChatSessionModel, session_id)
        except SessionStorageError:
            raise
        except Exception as e:
            raise SessionStorageError(
                f"Failed to read session: {type(e).__name__}",
                session_id=session_id,
            ) from e

        if row is None:
            return None
        return self._to_domain(row)

    async def save(self, session: Session, expected_version: int) -> Session:
        """
        Insert or update a session if nobody wrote it since it was read.

        Args:
            session: Session state to store
            expected_version: Version read before mutating (0 = not stored yet)

        Returns:
            Session: Stored session carrying its new version

        Raises:
            ConcurrentSessionWriteError: Stored version differs from expected_version
        """
        new_version = expected_version + 1
        payload = _messages_adapter.dump_python(session.messages, mode="json")

        async with self._session_factory() as db:
            try:
                async with db.begin():
                    if expected_version == 0:
                        db.add(ChatSessionModel(
                            session_id=session.session_id,
                            messages=payload,
                            summary=session.summary,
                            created_at=session.created_at,
                            last_active=session.last_active,
                            version=new_version,
                        ))
                    else:
                        result = await db.execute(
                            update(ChatSessionModel)
                            .where(ChatSessionModel.session_id == session.session_id)
                            .where(ChatSessionModel.version == expected_version)
                            .values(
                                messages=payload,
                                summary=session.summary,
                                last_active=session.last_active,
                                version=new_version,
                            )
                        )
                        if result.rowcount != 1:
                            raise ConcurrentSessionWriteError(
                                "Session version changed since read",
                                session_id=session.session_id,
                                details={"expected_version": expected_version},
                            )
            except IntegrityError as e:
                raise ConcurrentSessionWriteError(
                    "Session created concurrently",
                    session_id=session.session_id,
                ) from e

        return session.model_copy(update={"version": new_version})

    async def delete(self, session_id: str) -> None:
        """Delete a session record if present."""
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    await db.execute(
                        delete(ChatSessionModel).where(ChatSessionModel.session_id == session_id)
                    )
        except Exception as e:
            raise SessionStorageError(
                f"Failed to delete session: {type(e).__name__}",
                session_id=session_id,
            ) from e

    async def delete_idle_since(self, cutoff: datetime) -> int:
        """
        Delete every session whose last write is older than cutoff.

        Args:
            cutoff: Aware UTC datetime

        Returns:
            int: Number of deleted records
        """
        async with self._session_factory() as db:
            async with db.begin():
                result = await db.execute(
                    delete(ChatSessionModel).where(ChatSessionModel.last_active < cutoff)
                )
        return result.rowcount or 0

    async def count(self) -> int:
        """Number of stored sessions."""
        async with self._session_factory() as db:
            result = await db.execute(select(ChatSessionModel.session_id))
            return len(result.scalars().all())
