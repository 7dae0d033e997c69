"""
Schedule conflict detection.

A user may not hold two meetups whose start hours lie within
`min_separation_hours` of each other. Both starts are compared by the top
of their hour, which the half-open window expresses without rounding the
stored dates:

    hour_start = floor_hour(candidate.date)
    window     = [hour_start - separation, hour_start + separation + 1h)

A meetup starting at t falls in the window exactly when
|floor_hour(t) - hour_start| <= separation, so 10:40 and 10:05 collide
like 10:00 and 10:00 would, and the outcome does not depend on which of
the two meetups was joined first.

Never cached: the user's commitment set changes with every join/leave.
"""

from datetime import datetime, timedelta
from typing import Optional

from meetups.core.logging import get_logger
from meetups.core.metrics import record_conflict_check
from meetups.domain import EventSnapshot, RepositoryError
from meetups.services.interfaces import EventRepository

logger = get_logger(__name__)


def start_of_hour(value: datetime) -> datetime:
    return value.replace(minute=0, second=0, microsecond=0)


def conflict_window(start: datetime, min_separation_hours: int) -> tuple[datetime, datetime]:
    hour_start = start_of_hour(start)
    separation = timedelta(hours=min_separation_hours)
    return hour_start - separation, hour_start + separation + timedelta(hours=1)


class ConflictDetector:

    def __init__(self, events: EventRepository):
        self._events = events

    async def find_conflict(
        self,
        requester_id: int,
        candidate: EventSnapshot,
        min_separation_hours: int,
    ) -> Optional[EventSnapshot]:
        """
        Return a meetup the requester already holds that collides with
        `candidate`, or None.

        Fails closed: a repository failure propagates, it is never read as
        "no conflict".
        """
        window_start, window_end = conflict_window(candidate.date, min_separation_hours)
        try:
            conflict = await self._events.find_conflicting(
                requester_id, window_start, window_end, exclude_id=candidate.id
            )
        except RepositoryError as e:
            record_conflict_check("error")
            logger.error(
                "conflict_check_failed",
                meetup_id=candidate.id,
                user_id=requester_id,
                error=str(e),
            )
            raise

        if conflict is None:
            record_conflict_check("clear")
            return None

        record_conflict_check("conflict")
        logger.info(
            "subscription_conflict",
            meetup_id=candidate.id,
            conflicting_meetup_id=conflict.id,
            user_id=requester_id,
            window_start=window_start.isoformat(),
            window_end=window_end.isoformat(),
        )
        return conflict
