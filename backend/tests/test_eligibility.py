"""
Tests for join/leave eligibility rules and their priority order.
"""

from datetime import datetime, timezone, timedelta

from meetups.domain import AdmissionErrorKind, EventSnapshot
from meetups.services.eligibility import check_join, check_leave

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
OWNER = 1
ALICE = 2


def meetup(date=None, subscribers=()):
    return EventSnapshot(
        id=10,
        title="E1",
        date=date or datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc),
        owner_id=OWNER,
        subscribers=frozenset(subscribers),
    )


def test_join_admissible():
    assert check_join(meetup(), ALICE, NOW) is None


def test_join_missing_event():
    assert check_join(None, ALICE, NOW).kind is AdmissionErrorKind.NOT_FOUND


def test_join_past_event():
    past = meetup(date=NOW - timedelta(minutes=1))
    assert check_join(past, ALICE, NOW).kind is AdmissionErrorKind.EVENT_CLOSED


def test_join_owner_excluded():
    assert check_join(meetup(), OWNER, NOW).kind is AdmissionErrorKind.OWNER_CANNOT_SUBSCRIBE


def test_join_already_subscribed():
    assert check_join(meetup(subscribers=[ALICE]), ALICE, NOW).kind is AdmissionErrorKind.ALREADY_SUBSCRIBED


def test_join_closed_wins_over_owner_and_duplicate():
    """A past meetup reports closed even for its owner or an existing subscriber."""
    past = meetup(date=NOW - timedelta(days=1), subscribers=[ALICE])
    assert check_join(past, OWNER, NOW).kind is AdmissionErrorKind.EVENT_CLOSED
    assert check_join(past, ALICE, NOW).kind is AdmissionErrorKind.EVENT_CLOSED


def test_join_start_equal_to_now_is_not_past():
    assert check_join(meetup(date=NOW), ALICE, NOW) is None


def test_leave_admissible():
    assert check_leave(meetup(subscribers=[ALICE]), ALICE, NOW) is None


def test_leave_missing_event():
    assert check_leave(None, ALICE, NOW).kind is AdmissionErrorKind.NOT_FOUND


def test_leave_past_event():
    past = meetup(date=NOW - timedelta(hours=1), subscribers=[ALICE])
    assert check_leave(past, ALICE, NOW).kind is AdmissionErrorKind.EVENT_CLOSED


def test_leave_not_subscribed():
    assert check_leave(meetup(), ALICE, NOW).kind is AdmissionErrorKind.NOT_SUBSCRIBED


def test_checks_do_not_touch_snapshot():
    event = meetup(subscribers=[ALICE])
    check_join(event, 3, NOW)
    check_leave(event, ALICE, NOW)
    assert event.subscribers == frozenset({ALICE})


def test_rejection_messages():
    assert check_join(None, ALICE, NOW).message == "Meetup does not exist"
    assert check_leave(meetup(), ALICE, NOW).message == "You are not subscribed"


def test_is_past_uses_current_time():
    assert meetup(date=datetime(2000, 1, 1, tzinfo=timezone.utc)).is_past
    assert not meetup(date=datetime(2999, 1, 1, tzinfo=timezone.utc)).is_past
