"""
Tests for subscriber set mutations and the optimistic version check.
"""

from datetime import datetime, timezone

import pytest

from meetups.domain import ConcurrentModificationError, EventSnapshot
from meetups.repositories import InMemoryEventRepository
from meetups.services.subscriber_set import SubscriberSetMutator


def meetup(subscribers=(), version=1):
    return EventSnapshot(
        id=1,
        title="E1",
        date=datetime(2024, 6, 1, 10, tzinfo=timezone.utc),
        owner_id=1,
        subscribers=frozenset(subscribers),
        version=version,
    )


@pytest.mark.asyncio
async def test_join_adds_one_member_and_bumps_version():
    original = meetup(subscribers=[2])
    repo = InMemoryEventRepository([original])

    updated = await SubscriberSetMutator(repo).join(original, 3)

    assert updated.subscribers == frozenset({2, 3})
    assert updated.version == 2
    assert repo.get(1) == updated


@pytest.mark.asyncio
async def test_join_does_not_alias_callers_snapshot():
    original = meetup(subscribers=[2])
    repo = InMemoryEventRepository([original])

    await SubscriberSetMutator(repo).join(original, 3)

    assert original.subscribers == frozenset({2})
    assert original.version == 1


@pytest.mark.asyncio
async def test_leave_removes_exactly_that_member():
    original = meetup(subscribers=[2, 3])
    repo = InMemoryEventRepository([original])

    updated = await SubscriberSetMutator(repo).leave(original, 2)

    assert updated.subscribers == frozenset({3})


@pytest.mark.asyncio
async def test_leave_absent_member_is_a_programming_error():
    original = meetup()
    repo = InMemoryEventRepository([original])

    with pytest.raises(ValueError):
        await SubscriberSetMutator(repo).leave(original, 2)
    assert repo.writes == 0


@pytest.mark.asyncio
async def test_stale_version_is_rejected():
    repo = InMemoryEventRepository([meetup(version=5)])
    stale = meetup(version=4)

    with pytest.raises(ConcurrentModificationError):
        await SubscriberSetMutator(repo).join(stale, 3)
    assert repo.get(1).subscribers == frozenset()
