"""
Pytest fixtures for the test database, seeded users/meetups, the service
and an HTTP client.

Uses SQLite in memory (aiosqlite, StaticPool) with tables created and
dropped around each test for isolation.
"""

from datetime import datetime
from typing import AsyncGenerator, Callable, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from meetups.main import app
from meetups.api.deps import get_subscription_service
from meetups.core.security import create_access_token
from meetups.db.base import Base
from meetups.models import File, Meetup, Subscription, User
from meetups.repositories import SqlAlchemyEventRepository, SqlAlchemyUserRepository
from meetups.services.subscription_service import SubscriptionService

from helpers import RecordingNotifier

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create tables, yield a session factory, then drop tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def owner(session_factory) -> User:
    async with session_factory() as session:
        avatar = File(name="owner.png", path="owner-avatar.png")
        user = User(name="Olivia Owner", email="owner@example.com", avatar=avatar)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest_asyncio.fixture
async def alice(session_factory) -> User:
    async with session_factory() as session:
        avatar = File(name="alice.png", path="alice-avatar.png")
        user = User(name="Alice", email="alice@example.com", avatar=avatar)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest_asyncio.fixture
async def bob(session_factory) -> User:
    async with session_factory() as session:
        user = User(name="Bob", email="bob@example.com")
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest_asyncio.fixture
async def make_meetup(session_factory, owner) -> Callable:
    """Factory: insert a meetup owned by `owner` (unless overridden)."""

    async def _make(
        date: datetime,
        title: str = "Python Meetup",
        owner_id: Optional[int] = None,
        subscribers: tuple[int, ...] = (),
        with_banner: bool = False,
    ) -> Meetup:
        async with session_factory() as session:
            meetup = Meetup(
                title=title,
                description=f"{title} description",
                location="Main Hall",
                date=date,
                owner_id=owner_id or owner.id,
                banner=File(name="banner.png", path=f"banner-{title}.png".replace(" ", "-")) if with_banner else None,
            )
            meetup.subscriptions = [Subscription(user_id=user_id) for user_id in subscribers]
            session.add(meetup)
            await session.commit()
            await session.refresh(meetup)
            return meetup

    return _make


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def event_repository(session_factory) -> SqlAlchemyEventRepository:
    return SqlAlchemyEventRepository(session_factory)


@pytest.fixture
def user_repository(session_factory) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(session_factory)


@pytest.fixture
def service(event_repository, user_repository, notifier) -> SubscriptionService:
    return SubscriptionService(event_repository, user_repository, notifier, min_separation_hours=2)


@pytest_asyncio.fixture(scope="function")
async def client(service: SubscriptionService) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client wired to the test service."""
    app.dependency_overrides[get_subscription_service] = lambda: service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await service.drain()
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[[User], dict]:
    """Authorization headers with a Bearer token for the given user."""

    def _headers(user: User) -> dict:
        token = create_access_token(data={"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail_with=RuntimeError("smtp relay down"))
