"""
Per-meetup asyncio locks.

Serializes read-modify-write of one meetup's subscriber set inside this
process. Cross-process races are caught by the repository's version check.
Locks are dropped once no request holds or waits on them.
"""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator


class EventLockRegistry:

    def __init__(self):
        self._locks: dict[int, asyncio.Lock] = {}
        self._users: defaultdict[int, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, event_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(event_id, asyncio.Lock())
        self._users[event_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[event_id] -= 1
            if self._users[event_id] == 0:
                del self._users[event_id]
                del self._locks[event_id]

    def __len__(self) -> int:
        return len(self._locks)
