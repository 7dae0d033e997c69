"""
SQLAlchemy-backed repositories.

Each method opens its own session from the factory and converts ORM rows
into immutable snapshots before the session closes, so no lazy loads can
fire outside a transaction.
"""

from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from meetups.core.logging import get_logger
from meetups.domain import (
    ConcurrentModificationError,
    EventSnapshot,
    FileRef,
    RepositoryError,
    UserProfile,
)
from meetups.models import File, Meetup, Subscription, User
from meetups.services.interfaces import EventRepository, UserRepository

logger = get_logger(__name__)


def to_file_ref(file: Optional[File]) -> Optional[FileRef]:
    if file is None:
        return None
    return FileRef(id=file.id, path=file.path, url=file.url)


def to_profile(user: Optional[User]) -> Optional[UserProfile]:
    if user is None:
        return None
    return UserProfile(id=user.id, name=user.name, email=user.email, avatar=to_file_ref(user.avatar))


def to_snapshot(meetup: Meetup) -> EventSnapshot:
    return EventSnapshot(
        id=meetup.id,
        title=meetup.title,
        description=meetup.description,
        location=meetup.location,
        date=meetup.date,
        owner_id=meetup.owner_id,
        subscribers=frozenset(s.user_id for s in meetup.subscriptions),
        version=meetup.version,
        owner=to_profile(meetup.owner),
        banner=to_file_ref(meetup.banner),
    )


@asynccontextmanager
async def _translate_errors(operation: str, **context):
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("repository_error", operation=operation, error=str(e), **context)
        raise RepositoryError(f"{operation} failed: {e}") from e


class SqlAlchemyEventRepository(EventRepository):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_by_id(self, event_id: int) -> Optional[EventSnapshot]:
        async with _translate_errors("find_meetup", meetup_id=event_id):
            async with self._session_factory() as session:
                result = await session.execute(select(Meetup).where(Meetup.id == event_id))
                meetup = result.scalar_one_or_none()
                return to_snapshot(meetup) if meetup else None

    async def find_conflicting(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
        exclude_id: int,
    ) -> Optional[EventSnapshot]:
        # Uses ix_meetups_date for the range and the subscriptions user index for membership
        query = (
            select(Meetup)
            .join(Subscription, Subscription.meetup_id == Meetup.id)
            .where(
                Subscription.user_id == user_id,
                Meetup.id != exclude_id,
                Meetup.date >= start,
                Meetup.date < end,
            )
            .order_by(Meetup.date.asc())
            .limit(1)
        )
        async with _translate_errors("find_conflicting", user_id=user_id):
            async with self._session_factory() as session:
                meetup = (await session.execute(query)).scalar_one_or_none()
                return to_snapshot(meetup) if meetup else None

    async def find_subscribed(self, user_id: int, after: datetime) -> list[EventSnapshot]:
        query = (
            select(Meetup)
            .join(Subscription, Subscription.meetup_id == Meetup.id)
            .where(Subscription.user_id == user_id, Meetup.date > after)
            .order_by(Meetup.date.asc())
        )
        async with _translate_errors("find_subscribed", user_id=user_id):
            async with self._session_factory() as session:
                result = await session.execute(query)
                return [to_snapshot(m) for m in result.scalars().all()]

    async def save(self, event: EventSnapshot, expected_version: int) -> EventSnapshot:
        """
        Write the subscriber set in one transaction:

        1. UPDATE meetups SET version = version + 1 WHERE id = :id AND version = :expected
        2. If rows_affected == 0 -> ConcurrentModificationError (transaction rolled back)
        3. Diff stored membership against `event.subscribers`, insert/delete the difference
        """
        async with _translate_errors("save_meetup", meetup_id=event.id):
            async with self._session_factory() as session:
                async with session.begin():
                    bumped = await session.execute(
                        update(Meetup)
                        .where(Meetup.id == event.id, Meetup.version == expected_version)
                        .values(version=Meetup.version + 1)
                        .execution_options(synchronize_session=False)
                    )
                    if bumped.rowcount == 0:
                        raise ConcurrentModificationError(event.id, expected_version)

                    stored = await session.execute(
                        select(Subscription.user_id).where(Subscription.meetup_id == event.id)
                    )
                    current = set(stored.scalars().all())
                    added = event.subscribers - current
                    removed = current - event.subscribers

                    if removed:
                        await session.execute(
                            delete(Subscription)
                            .where(
                                Subscription.meetup_id == event.id,
                                Subscription.user_id.in_(removed),
                            )
                            .execution_options(synchronize_session=False)
                        )
                    session.add_all(Subscription(meetup_id=event.id, user_id=user_id) for user_id in added)

        return replace(event, version=expected_version + 1)


class SqlAlchemyUserRepository(UserRepository):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_by_id(self, user_id: int) -> Optional[UserProfile]:
        async with _translate_errors("find_user", user_id=user_id):
            async with self._session_factory() as session:
                result = await session.execute(select(User).where(User.id == user_id))
                return to_profile(result.scalar_one_or_none())
