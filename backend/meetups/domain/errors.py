"""
Admission outcomes and infrastructure faults.

Rejections are expected outcomes and travel as values inside an
AdmissionResult. Only infrastructure problems are raised.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from meetups.domain.models import EventSnapshot

T = TypeVar("T")


class AdmissionErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    EVENT_CLOSED = "event_closed"
    OWNER_CANNOT_SUBSCRIBE = "owner_cannot_subscribe"
    ALREADY_SUBSCRIBED = "already_subscribed"
    NOT_SUBSCRIBED = "not_subscribed"
    CONFLICTING_SUBSCRIPTION = "conflicting_subscription"


_MESSAGES = {
    AdmissionErrorKind.NOT_FOUND: "Meetup does not exist",
    AdmissionErrorKind.EVENT_CLOSED: "Meetup is already finished",
    AdmissionErrorKind.OWNER_CANNOT_SUBSCRIBE: "The meetup owner can't subscribe",
    AdmissionErrorKind.ALREADY_SUBSCRIBED: "Already subscribed",
    AdmissionErrorKind.NOT_SUBSCRIBED: "You are not subscribed",
    AdmissionErrorKind.CONFLICTING_SUBSCRIPTION: "You are already subscribed to a meetup at the same time",
}


@dataclass(frozen=True)
class AdmissionError:
    kind: AdmissionErrorKind
    conflict: Optional[EventSnapshot] = None

    @property
    def message(self) -> str:
        return _MESSAGES[self.kind]

    @classmethod
    def conflicting(cls, event: EventSnapshot) -> "AdmissionError":
        return cls(AdmissionErrorKind.CONFLICTING_SUBSCRIPTION, conflict=event)


@dataclass(frozen=True)
class AdmissionResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[AdmissionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "AdmissionResult[T]":
        return cls(value=value)

    @classmethod
    def rejected(cls, error: AdmissionError) -> "AdmissionResult[T]":
        return cls(error=error)


class InfrastructureError(Exception):
    """A collaborator (database, queue) failed; the request is aborted."""


class RepositoryError(InfrastructureError):
    pass


class ConcurrentModificationError(InfrastructureError):
    """The meetup changed between read and write (optimistic lock lost)."""

    def __init__(self, event_id: int, expected_version: int):
        super().__init__(f"Meetup {event_id} changed concurrently (expected version {expected_version})")
        self.event_id = event_id
        self.expected_version = expected_version
