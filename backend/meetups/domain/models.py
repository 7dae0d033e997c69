"""
Plain value objects the admission engine works on.

Repositories hand out these snapshots instead of ORM instances so the
engine never mutates a view the caller still holds: changing the subscriber
set always produces a new snapshot.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite round-trips) as UTC instants."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class FileRef:
    id: int
    path: str
    url: str


@dataclass(frozen=True)
class UserProfile:
    id: int
    name: str
    email: str
    avatar: Optional[FileRef] = None


@dataclass(frozen=True)
class EventSnapshot:
    id: int
    title: str
    date: datetime
    owner_id: int
    description: Optional[str] = None
    location: Optional[str] = None
    subscribers: frozenset[int] = field(default_factory=frozenset)
    version: int = 1
    owner: Optional[UserProfile] = None
    banner: Optional[FileRef] = None

    def __post_init__(self):
        object.__setattr__(self, "date", as_utc(self.date))
        object.__setattr__(self, "subscribers", frozenset(self.subscribers))

    def is_past_at(self, now: datetime) -> bool:
        return self.date < now

    @property
    def is_past(self) -> bool:
        return self.is_past_at(utcnow())

    @property
    def subscriber_count(self) -> int:
        return len(self.subscribers)

    def has_subscriber(self, user_id: int) -> bool:
        return user_id in self.subscribers

    def with_subscriber(self, user_id: int) -> "EventSnapshot":
        return replace(self, subscribers=self.subscribers | {user_id})

    def without_subscriber(self, user_id: int) -> "EventSnapshot":
        return replace(self, subscribers=self.subscribers - {user_id})


@dataclass(frozen=True)
class EventSummary:
    """Public fields returned after a successful join."""

    title: str
    description: Optional[str]
    location: Optional[str]
    date: datetime
    banner: Optional[FileRef]

    @classmethod
    def from_event(cls, event: EventSnapshot) -> "EventSummary":
        return cls(
            title=event.title,
            description=event.description,
            location=event.location,
            date=event.date,
            banner=event.banner,
        )


class SubscriptionOperation(str, Enum):
    JOIN = "join"
    LEAVE = "leave"


@dataclass(frozen=True)
class SubscriptionRequest:
    requester_id: int
    event_id: int
    operation: SubscriptionOperation
