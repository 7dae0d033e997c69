"""
In-memory repositories.

Same contracts as the SQLAlchemy implementations, backed by dicts. Used
by the test suite and for running the engine without a database. Every
call yields to the event loop once (or sleeps `latency` seconds) so
concurrent callers interleave the way they would against a real store.
"""

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Optional

from meetups.domain import ConcurrentModificationError, EventSnapshot, UserProfile
from meetups.services.interfaces import EventRepository, UserRepository


class InMemoryEventRepository(EventRepository):

    def __init__(self, events: Optional[list[EventSnapshot]] = None, latency: float = 0):
        self._events: dict[int, EventSnapshot] = {e.id: e for e in events or []}
        self._latency = latency
        self.writes = 0

    def add(self, event: EventSnapshot) -> EventSnapshot:
        self._events[event.id] = event
        return event

    def get(self, event_id: int) -> Optional[EventSnapshot]:
        """Synchronous peek for assertions; bypasses latency."""
        return self._events.get(event_id)

    async def find_by_id(self, event_id: int) -> Optional[EventSnapshot]:
        await asyncio.sleep(self._latency)
        return self._events.get(event_id)

    async def find_conflicting(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
        exclude_id: int,
    ) -> Optional[EventSnapshot]:
        await asyncio.sleep(self._latency)
        candidates = sorted(self._events.values(), key=lambda e: e.date)
        for event in candidates:
            if event.id != exclude_id and user_id in event.subscribers and start <= event.date < end:
                return event
        return None

    async def find_subscribed(self, user_id: int, after: datetime) -> list[EventSnapshot]:
        await asyncio.sleep(self._latency)
        return sorted(
            (e for e in self._events.values() if user_id in e.subscribers and e.date > after),
            key=lambda e: e.date,
        )

    async def save(self, event: EventSnapshot, expected_version: int) -> EventSnapshot:
        await asyncio.sleep(self._latency)
        stored = self._events.get(event.id)
        if stored is None or stored.version != expected_version:
            raise ConcurrentModificationError(event.id, expected_version)
        saved = replace(event, version=expected_version + 1)
        self._events[event.id] = saved
        self.writes += 1
        return saved


class InMemoryUserRepository(UserRepository):

    def __init__(self, users: Optional[list[UserProfile]] = None):
        self._users: dict[int, UserProfile] = {u.id: u for u in users or []}

    def add(self, user: UserProfile) -> UserProfile:
        self._users[user.id] = user
        return user

    async def find_by_id(self, user_id: int) -> Optional[UserProfile]:
        await asyncio.sleep(0)
        return self._users.get(user_id)
