"""
Eligibility checks for join/leave requests.

Pure decisions over a loaded snapshot: no I/O, no mutation. Checks run in
a fixed priority order so the same request always yields the same message.
"""

from datetime import datetime
from typing import Optional

from meetups.domain import AdmissionError, AdmissionErrorKind, EventSnapshot


def check_join(event: Optional[EventSnapshot], requester_id: int, now: datetime) -> Optional[AdmissionError]:
    """Return the first rejection that applies to a join, or None if admissible."""
    if event is None:
        return AdmissionError(AdmissionErrorKind.NOT_FOUND)
    if event.is_past_at(now):
        return AdmissionError(AdmissionErrorKind.EVENT_CLOSED)
    if requester_id == event.owner_id:
        return AdmissionError(AdmissionErrorKind.OWNER_CANNOT_SUBSCRIBE)
    if event.has_subscriber(requester_id):
        return AdmissionError(AdmissionErrorKind.ALREADY_SUBSCRIBED)
    return None


def check_leave(event: Optional[EventSnapshot], requester_id: int, now: datetime) -> Optional[AdmissionError]:
    """Return the first rejection that applies to a leave, or None if admissible."""
    if event is None:
        return AdmissionError(AdmissionErrorKind.NOT_FOUND)
    if event.is_past_at(now):
        return AdmissionError(AdmissionErrorKind.EVENT_CLOSED)
    if not event.has_subscriber(requester_id):
        return AdmissionError(AdmissionErrorKind.NOT_SUBSCRIBED)
    return None
