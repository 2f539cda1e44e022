"""Per-session mutual exclusion for transcript read-modify-write cycles.

Each transcript is rewritten in full on every change, so two overlapping
requests for the same session would lose one update. Every mutation of a
session runs inside ``SessionLocks.lock(session_key)``.

Locks live in process memory: the service runs as a single process and the
transcript files are owned by it.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

logger = structlog.get_logger(__name__)


class SessionLocks:
    """Registry of one ``asyncio.Lock`` per session key."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    def is_locked(self, key: str) -> bool:
        """Return True if a holder currently owns the lock for ``key``."""
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def lock(self, key: str) -> AsyncGenerator[None, None]:
        """Hold the lock for ``key`` for the duration of the block.

        Example:
            async with session_locks.lock(session_id):
                await store.append(ref, "user", text)
        """
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        if lock.locked():
            logger.debug("session_lock_waiting", session_key=key)
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                # Nobody holds or waits for it any more
                del self._waiters[key]
                del self._locks[key]


_session_locks: SessionLocks | None = None


def get_session_locks() -> SessionLocks:
    """Get the singleton SessionLocks instance."""
    global _session_locks
    if _session_locks is None:
        _session_locks = SessionLocks()
    return _session_locks
