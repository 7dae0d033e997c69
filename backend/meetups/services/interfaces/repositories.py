"""
Persistence interfaces consumed by the admission engine.
Allows swapping the backing store without touching admission logic.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from meetups.domain import EventSnapshot, UserProfile


class EventRepository(ABC):
    """
    Interface for meetup persistence.

    Implementations:
    - SqlAlchemyEventRepository: relational store with a subscriptions join table
    - InMemoryEventRepository: dict-backed index, for tests and local tooling
    """

    @abstractmethod
    async def find_by_id(self, event_id: int) -> Optional[EventSnapshot]:
        """Return the meetup with owner and banner projections, or None."""
        pass

    @abstractmethod
    async def find_conflicting(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
        exclude_id: int,
    ) -> Optional[EventSnapshot]:
        """
        Return one meetup, other than `exclude_id`, that `user_id` is
        subscribed to and whose date lies in [start, end) (end exclusive).
        """
        pass

    @abstractmethod
    async def find_subscribed(self, user_id: int, after: datetime) -> list[EventSnapshot]:
        """Meetups `user_id` is subscribed to starting after `after`, by date ascending."""
        pass

    @abstractmethod
    async def save(self, event: EventSnapshot, expected_version: int) -> EventSnapshot:
        """
        Persist `event.subscribers` atomically.

        Raises:
            ConcurrentModificationError: stored version is no longer `expected_version`
            RepositoryError: the store failed; nothing was written
        """
        pass


class UserRepository(ABC):

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[UserProfile]:
        """Return the user with avatar projection, or None."""
        pass
