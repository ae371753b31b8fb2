"""
Periodic removal of idle sessions.

Runs SessionStore.sweep_expired on an interval as an asyncio task owned
by the application lifespan.

Dependencies: asyncio, ivy.core.session_store
System role: Session expiry background job
"""

import asyncio
import contextlib
import logging

from ivy.core.session_store import SessionStore

logger = logging.getLogger(__name__)


class SessionSweeper:
    """Background task sweeping expired sessions every interval_seconds."""

    def __init__(self, store: SessionStore, interval_seconds: float = 300) -> None:
        self.store = store
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep_once(self) -> int:
        """Run one sweep; failures are logged and reported as zero removals."""
        try:
            removed = await self.store.sweep_expired()
        except Exception as e:
            logger.error(f"{__name__}:sweep_once - Sweep failed: {type(e).__name__}: {e}")
            return 0
        if removed:
            logger.info(f"{__name__}:sweep_once - Removed {removed} expired sessions")
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.sweep_once()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="session-sweeper")
        logger.info(f"{__name__}:start - Sweeping every {self.interval_seconds}s")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info(f"{__name__}:stop - Sweeper stopped")
