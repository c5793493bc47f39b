"""
In-process advisory locks keyed by session.

Serialises read-modify-write sequences on one session file within a
single event loop. Offers no protection against other processes.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class SessionLocks:
    """One asyncio.Lock per key, dropped once nobody holds or waits on it."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        if not self.enabled:
            yield
            return

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


__all__ = ["SessionLocks"]
