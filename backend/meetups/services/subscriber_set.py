"""
Subscriber set mutations.

Each call produces a new snapshot with exactly one membership added or
removed and hands it to the repository as a single compare-and-swap write
against the version that was read.
"""

from meetups.core.logging import get_logger
from meetups.domain import EventSnapshot
from meetups.services.interfaces import EventRepository

logger = get_logger(__name__)


class SubscriberSetMutator:

    def __init__(self, events: EventRepository):
        self._events = events

    async def join(self, event: EventSnapshot, requester_id: int) -> EventSnapshot:
        if event.has_subscriber(requester_id):
            raise ValueError(f"User {requester_id} is already subscribed to meetup {event.id}")
        saved = await self._events.save(event.with_subscriber(requester_id), expected_version=event.version)
        logger.debug("subscriber_added", meetup_id=event.id, user_id=requester_id, version=saved.version)
        return saved

    async def leave(self, event: EventSnapshot, requester_id: int) -> EventSnapshot:
        if not event.has_subscriber(requester_id):
            raise ValueError(f"User {requester_id} is not subscribed to meetup {event.id}")
        saved = await self._events.save(event.without_subscriber(requester_id), expected_version=event.version)
        logger.debug("subscriber_removed", meetup_id=event.id, user_id=requester_id, version=saved.version)
        return saved
