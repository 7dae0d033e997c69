"""
Subscription admission: join and leave a meetup.

CONCURRENCY STRATEGY: Per-meetup lock + Optimistic Locking with Retry
=====================================================================

Problem:
  Two users join the same meetup simultaneously.
  Both read subscribers={A}, one writes {A, B}, the other writes {A, C}.
  Result: Lost update, B or C silently disappears.

Solution:
  1. Inside one process, requests for the same meetup queue on an
     asyncio.Lock keyed by meetup id (EventLockRegistry). Requests for
     different meetups never wait on each other.
  2. Across processes, the repository writes with
     UPDATE meetups SET version = version + 1 WHERE id = :id AND version = :read_version
     If no row matches, someone else committed first -> re-read, re-check, retry.

  The whole read -> check -> conflict scan -> write sequence is re-run on
  retry, so the decision is always made against the state being replaced.

  The conflict scan is not locked globally. Two joins by the same user to
  two different meetups can race past each other's conflict check; the next
  attempt by that user re-validates against the committed set.

Rejections (not found, closed, owner, duplicate, conflict) are returned as
AdmissionResult values. Only infrastructure faults raise.

Notifications are dispatched as background tasks after the write commits.
A failing notifier is logged and counted, never surfaced, and never undoes
the subscription.
"""

import asyncio
from typing import Callable, Optional

from meetups.core.config import Settings, get_settings
from meetups.core.logging import get_logger
from meetups.core.metrics import admission_latency, db_retries, record_admission, record_notification
from meetups.domain import (
    AdmissionError,
    AdmissionResult,
    ConcurrentModificationError,
    EventSnapshot,
    EventSummary,
    InfrastructureError,
    SubscriptionOperation,
    SubscriptionRequest,
    UserProfile,
    utcnow,
)
from meetups.services.conflict_service import ConflictDetector
from meetups.services.eligibility import check_join, check_leave
from meetups.services.interfaces import EventRepository, NotificationContext, Notifier, UserRepository
from meetups.services.locks import EventLockRegistry
from meetups.services.subscriber_set import SubscriberSetMutator

logger = get_logger(__name__)


class SubscriptionService:

    def __init__(
        self,
        events: EventRepository,
        users: UserRepository,
        notifier: Notifier,
        *,
        min_separation_hours: int = 2,
        max_retry_attempts: int = 3,
        clock: Callable = utcnow,
    ):
        if max_retry_attempts < 1:
            raise ValueError(f"max_retry_attempts must be at least 1, got {max_retry_attempts}")
        self._events = events
        self._users = users
        self._notifier = notifier
        self._conflicts = ConflictDetector(events)
        self._mutator = SubscriberSetMutator(events)
        self._locks = EventLockRegistry()
        self._min_separation_hours = min_separation_hours
        self._max_retry_attempts = max_retry_attempts
        self._clock = clock
        self._pending: set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls,
        events: EventRepository,
        users: UserRepository,
        notifier: Notifier,
        settings: Optional[Settings] = None,
    ) -> "SubscriptionService":
        settings = settings or get_settings()
        return cls(
            events,
            users,
            notifier,
            min_separation_hours=settings.MIN_SEPARATION_HOURS,
            max_retry_attempts=settings.MAX_RETRY_ATTEMPTS,
        )

    async def handle(self, request: SubscriptionRequest) -> AdmissionResult:
        if request.operation is SubscriptionOperation.JOIN:
            return await self.join(request.event_id, request.requester_id)
        return await self.leave(request.event_id, request.requester_id)

    async def join(self, event_id: int, requester_id: int) -> AdmissionResult[EventSummary]:
        """
        Subscribe `requester_id` to meetup `event_id`.
        Retries up to max_retry_attempts on version conflicts.
        """
        with admission_latency.labels(operation="join").time():
            for attempt in range(1, self._max_retry_attempts + 1):
                async with self._locks.hold(event_id):
                    event = await self._events.find_by_id(event_id)
                    now = self._clock()

                    rejection = check_join(event, requester_id, now)
                    if rejection:
                        return self._reject(SubscriptionOperation.JOIN, event_id, requester_id, rejection)

                    conflict = await self._conflicts.find_conflict(
                        requester_id, event, self._min_separation_hours
                    )
                    if conflict:
                        return self._reject(
                            SubscriptionOperation.JOIN,
                            event_id,
                            requester_id,
                            AdmissionError.conflicting(conflict),
                        )

                    try:
                        updated = await self._mutator.join(event, requester_id)
                    except ConcurrentModificationError:
                        self._on_version_conflict(event_id, attempt)
                        if attempt == self._max_retry_attempts:
                            raise
                        continue
                break

        logger.info(
            "subscription_created",
            meetup_id=event_id,
            user_id=requester_id,
            subscribers=updated.subscriber_count,
            attempt=attempt,
        )
        record_admission(SubscriptionOperation.JOIN.value, "admitted")

        try:
            subscriber = await self._users.find_by_id(requester_id)
        except InfrastructureError as e:
            # Already committed; only the notification is lost.
            logger.warning(
                "notification_skipped",
                meetup_id=event_id,
                user_id=requester_id,
                reason="subscriber_lookup_failed",
                error=str(e),
            )
        else:
            self._notify_owner(updated, subscriber, now)

        return AdmissionResult.success(EventSummary.from_event(updated))

    async def leave(self, event_id: int, requester_id: int) -> AdmissionResult[None]:
        """Unsubscribe `requester_id` from meetup `event_id`. No conflict check, no notification."""
        with admission_latency.labels(operation="leave").time():
            for attempt in range(1, self._max_retry_attempts + 1):
                async with self._locks.hold(event_id):
                    event = await self._events.find_by_id(event_id)

                    rejection = check_leave(event, requester_id, self._clock())
                    if rejection:
                        return self._reject(SubscriptionOperation.LEAVE, event_id, requester_id, rejection)

                    try:
                        updated = await self._mutator.leave(event, requester_id)
                    except ConcurrentModificationError:
                        self._on_version_conflict(event_id, attempt)
                        if attempt == self._max_retry_attempts:
                            raise
                        continue
                break

        logger.info(
            "subscription_cancelled",
            meetup_id=event_id,
            user_id=requester_id,
            subscribers=updated.subscriber_count,
            attempt=attempt,
        )
        record_admission(SubscriptionOperation.LEAVE.value, "admitted")
        return AdmissionResult.success(None)

    async def list_my_subscriptions(self, requester_id: int) -> list[EventSnapshot]:
        """Upcoming meetups the requester is subscribed to, soonest first."""
        return await self._events.find_subscribed(requester_id, after=self._clock())

    async def drain(self) -> None:
        """Wait for in-flight notifications (shutdown, tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _reject(
        self,
        operation: SubscriptionOperation,
        event_id: int,
        requester_id: int,
        error: AdmissionError,
    ) -> AdmissionResult:
        logger.info(
            "subscription_rejected",
            operation=operation.value,
            meetup_id=event_id,
            user_id=requester_id,
            reason=error.kind.value,
        )
        record_admission(operation.value, error.kind.value)
        return AdmissionResult.rejected(error)

    def _on_version_conflict(self, event_id: int, attempt: int) -> None:
        db_retries.inc()
        logger.info(
            "subscription_retry",
            meetup_id=event_id,
            attempt=attempt,
            reason="version_conflict",
        )
        if attempt == self._max_retry_attempts:
            logger.warning("subscription_retries_exhausted", meetup_id=event_id, attempts=attempt)

    def _notify_owner(self, event: EventSnapshot, subscriber: Optional[UserProfile], subscribed_at) -> None:
        if event.owner is None or subscriber is None:
            logger.warning(
                "notification_skipped",
                meetup_id=event.id,
                reason="owner_missing" if event.owner is None else "subscriber_missing",
            )
            return

        context = NotificationContext(
            owner_name=event.owner.name,
            owner_email=event.owner.email,
            meetup_id=event.id,
            meetup_title=event.title,
            meetup_date=event.date,
            banner_url=event.banner.url if event.banner else None,
            subscriber_id=subscriber.id,
            subscriber_name=subscriber.name,
            subscriber_email=subscriber.email,
            subscriber_avatar_url=subscriber.avatar.url if subscriber.avatar else None,
            subscribed_at=subscribed_at,
            subscriber_count=event.subscriber_count,
        )
        task = asyncio.create_task(self._deliver(context))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, context: NotificationContext) -> None:
        try:
            await self._notifier.notify(context)
        except Exception as e:
            record_notification(False)
            logger.error(
                "notification_failed",
                meetup_id=context.meetup_id,
                user_id=context.subscriber_id,
                error=str(e),
            )
            return
        record_notification(True)
