"""
In-process session repository.

Keeps serialized session records in a dict so every read decodes a fresh
copy, the same way the SQL repository does. Suitable for a single process
and for tests.

Dependencies: pydantic, ivy.models.session
System role: Semi-durable session store backend
"""

import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ivy.core.exceptions import ConcurrentSessionWriteError, CorruptSessionRecordError
from ivy.models.session import Session

logger = logging.getLogger(__name__)


class InMemorySessionRepository:
    """SessionRepository holding JSON-compatible records in memory."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    async def get(self, session_id: str) -> Session | None:
        record = self._records.get(session_id)
        if record is None:
            return None
        try:
            return Session.model_validate(record)
        except PydanticValidationError as e:
            raise CorruptSessionRecordError(
                "Corrupt session record",
                session_id=session_id,
                details={"errors": e.error_count()},
            ) from e

    async def save(self, session: Session, expected_version: int) -> Session:
        stored = self._records.get(session.session_id)
        stored_version = stored.get("version", 0) if isinstance(stored, dict) else 0
        if stored is not None and stored_version != expected_version:
            raise ConcurrentSessionWriteError(
                "Session version changed since read",
                session_id=session.session_id,
                details={"expected_version": expected_version, "stored_version": stored_version},
            )
        if stored is None and expected_version != 0:
            raise ConcurrentSessionWriteError(
                "Session deleted since read",
                session_id=session.session_id,
            )

        saved = session.model_copy(update={"version": expected_version + 1})
        self._records[session.session_id] = saved.model_dump(mode="json")
        return saved

    async def delete(self, session_id: str) -> None:
        self._records.pop(session_id, None)

    async def delete_idle_since(self, cutoff: datetime) -> int:
        expired = []
        for session_id, record in self._records.items():
            try:
                last_active = datetime.fromisoformat(record["last_active"])
            except (KeyError, TypeError, ValueError):
                # Unreadable records are swept too
                expired.append(session_id)
                continue
            if last_active < cutoff:
                expired.append(session_id)
        for session_id in expired:
            del self._records[session_id]
        return len(expired)

    async def count(self) -> int:
        return len(self._records)
