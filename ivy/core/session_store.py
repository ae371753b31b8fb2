"""
Session store business logic.

Resolves, appends to, compacts, resets and sweeps per-identifier
conversation transcripts on top of a SessionRepository.

Writes for one identifier are serialized by an in-process lock per key, and
every save carries the version it was read at so that a second process
writing the same record forces a re-read instead of a lost update.
Undecodable records are treated as absent and replaced. A failed read only
makes the session absent for that call; the stored record is left alone.

Dependencies: ivy.core.compactor, ivy.core.interfaces, ivy.models.session
System role: Conversational memory lifecycle
"""

import asyncio
import logging
import weakref
from collections.abc import Awaitable, Callable
from datetime import timedelta

from ivy.core.compactor import ContextCompactor
from ivy.core.exceptions import (
    ConcurrentSessionWriteError,
    CorruptSessionRecordError,
    SessionStorageError,
)
from ivy.core.interfaces import SessionRepository
from ivy.models.session import Message, Role, Session, utc_now

logger = logging.getLogger(__name__)


class KeyedLocks:
    """asyncio.Lock per key, released for garbage collection once unused."""

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock


class SessionStore:
    """
    Per-session conversational memory.

    Contract:
    - resolve() never raises for an unknown or expired identifier.
    - append() leaves at most window_size messages stored.
    - history() excludes synthetic system messages.
    - reset() is idempotent.
    """

    def __init__(
        self,
        repository: SessionRepository,
        compactor: ContextCompactor,
        timeout: timedelta = timedelta(minutes=30),
        max_write_retries: int = 3,
    ) -> None:
        """
        Initialize session store.

        Args:
            repository: Keyed persistence backend
            compactor: Context compactor applied after every append
            timeout: Idle time after which a session is treated as absent
            max_write_retries: Attempts for a write that hits a version conflict
        """
        self._repository = repository
        self._compactor = compactor
        self._timeout = timeout
        self._max_write_retries = max_write_retries
        self._locks = KeyedLocks()

    @property
    def window_size(self) -> int:
        return self._compactor.window_size

    async def _forget(self, session_id: str) -> None:
        try:
            await self._repository.delete(session_id)
        except SessionStorageError as e:
            logger.warning(f"{__name__}:_forget - Could not delete session_id={session_id}: {e.message}")

    async def _load(self, session_id: str) -> Session | None:
        """Load a live session; corrupt, expired or unreadable records count as absent."""
        try:
            session = await self._repository.get(session_id)
        except CorruptSessionRecordError as e:
            logger.warning(
                f"{__name__}:_load - Corrupt record for session_id={session_id}, "
                f"starting fresh: {e.message}"
            )
            await self._forget(session_id)
            return None
        except SessionStorageError as e:
            logger.error(f"{__name__}:_load - Read failed for session_id={session_id}: {e.message}")
            return None

        if session is not None and session.is_expired(self._timeout):
            logger.info(f"{__name__}:_load - Session expired: session_id={session_id}")
            await self._forget(session_id)
            return None
        return session

    async def resolve(self, session_id: str) -> Session:
        """
        Return the live session for an identifier, or a fresh one.

        Args:
            session_id: Opaque session identifier

        Returns:
            Session: Existing session, or a new empty session (not yet persisted)
        """
        session = await self._load(session_id)
        return session if session is not None else Session.new(session_id)

    async def _mutate(
        self,
        session_id: str,
        mutation: Callable[[Session], Awaitable[Session | None]],
    ) -> Session | None:
        """
        Apply a mutation under the per-key lock with optimistic retry.

        The mutation always starts from freshly loaded state, so a retry after
        a version conflict re-applies it exactly once to the winning write.
        A mutation returning None skips the write.
        """
        async with self._locks.get(session_id):
            for attempt in range(1, self._max_write_retries + 1):
                current = await self._load(session_id)
                expected_version = current.version if current is not None else 0
                base = current if current is not None else Session.new(session_id)

                updated = await mutation(base)
                if updated is None:
                    return current
                try:
                    return await self._repository.save(updated, expected_version)
                except ConcurrentSessionWriteError:
                    logger.warning(
                        f"{__name__}:_mutate - Version conflict for session_id={session_id}, "
                        f"attempt {attempt}/{self._max_write_retries}"
                    )
            raise ConcurrentSessionWriteError(
                "Session kept changing during write",
                session_id=session_id,
            )

    async def append(self, session_id: str, role: Role, content: str) -> Message:
        """
        Append a message, compact if needed and persist.

        Args:
            session_id: Opaque session identifier
            role: Message author
            content: Message text

        Returns:
            Message: The appended message (its id can be used with discard())
        """
        message = Message(role=role, content=content)

        async def _append(session: Session) -> Session:
            grown = session.model_copy(update={
                "messages": [*session.messages, message],
                "last_active": utc_now(),
            })
            return await self._compactor.acompact(grown)

        session = await self._mutate(session_id, _append)
        logger.info(
            f"{__name__}:append - session_id={session_id}, role={role.value}, "
            f"window={len(session.messages)}, has_summary={session.summary is not None}"
        )
        return message

    async def discard(self, session_id: str, message_id: str) -> bool:
        """
        Remove one message if it is still in the window.

        Args:
            session_id: Opaque session identifier
            message_id: Id returned by append()

        Returns:
            bool: True if the message was found and removed
        """
        removed = False

        async def _discard(session: Session) -> Session | None:
            nonlocal removed
            kept = [m for m in session.messages if m.id != message_id]
            removed = len(kept) != len(session.messages)
            if not removed:
                return None
            return session.model_copy(update={"messages": kept})

        await self._mutate(session_id, _discard)
        if removed:
            logger.info(f"{__name__}:discard - Retracted message from session_id={session_id}")
        return removed

    async def history(self, session_id: str) -> list[Message]:
        """Current window in insertion order, without system messages."""
        session = await self._load(session_id)
        return session.conversation() if session is not None else []

    async def summary(self, session_id: str) -> str | None:
        """Running summary of compacted turns, if any."""
        session = await self._load(session_id)
        return session.summary if session is not None else None

    async def reset(self, session_id: str) -> None:
        """Delete all state for an identifier. Idempotent."""
        async with self._locks.get(session_id):
            await self._repository.delete(session_id)
        logger.info(f"{__name__}:reset - session_id={session_id}")

    async def sweep_expired(self) -> int:
        """
        Remove every session idle for longer than the timeout.

        Returns:
            int: Number of sessions removed
        """
        cutoff = utc_now() - self._timeout
        removed = await self._repository.delete_idle_since(cutoff)
        if removed:
            logger.info(f"{__name__}:sweep_expired - Removed {removed} expired sessions")
        return removed
