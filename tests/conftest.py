from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from src.api.deps import get_db_session
from src.api.main import app
from src.infrastructure.db.base import Base
from src.infrastructure.db.models import (
    AssetCategory,
    AssetModel,
    AssetStatus,
    AssetStatusHistory,
    UserModel,
    UserRole,
)

from tests.utils import ADMIN_ID, MANAGER_ID, STAFF_ID, STAFF_TWO_ID

SEED_USERS = (
    {"id": ADMIN_ID, "email": "admin@example.com", "name": "Ada Admin", "role": UserRole.ADMIN},
    {
        "id": MANAGER_ID,
        "email": "manager@example.com",
        "name": "Max Manager",
        "role": UserRole.MANAGER,
    },
    {"id": STAFF_ID, "email": "staff@example.com", "name": "Sam Staff", "role": UserRole.USER},
    {
        "id": STAFF_TWO_ID,
        "email": "staff2@example.com",
        "name": "Riley Staff",
        "role": UserRole.USER,
    },
)

AssetFactory = Callable[..., Awaitable[AssetModel]]


@pytest.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    # One shared connection keeps the in-memory database alive across sessions.
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", future=True, poolclass=StaticPool
    )
    factory = async_sessionmaker(engine, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with factory() as session:
        await seed_users(session)

    yield factory
    await engine.dispose()


async def seed_users(session: AsyncSession) -> None:
    existing = await session.scalar(select(UserModel.id).limit(1))
    if existing:
        return

    for user in SEED_USERS:
        session.add(UserModel(**user))
    await session.commit()


@pytest.fixture()
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session handed to the service under test."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the app with the in-memory database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
def asset_factory(session_factory: async_sessionmaker[AsyncSession]) -> AssetFactory:
    """Insert an asset row directly, bypassing the services."""

    async def _create(
        *,
        name: str = "ThinkPad X1",
        category: AssetCategory = AssetCategory.HARDWARE,
        status: AssetStatus = AssetStatus.AVAILABLE,
        assignee_id: str | None = None,
        created_by_id: str = ADMIN_ID,
        **fields,
    ) -> AssetModel:
        async with session_factory() as session:
            asset = AssetModel(
                name=name,
                category=category,
                status=status,
                assignee_id=assignee_id,
                created_by_id=created_by_id,
                **fields,
            )
            session.add(asset)
            await session.commit()
            return asset

    return _create


@pytest.fixture()
def load_asset(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[str], Awaitable[AssetModel | None]]:
    """Read the committed state of an asset through a fresh session."""

    async def _load(asset_id: str) -> AssetModel | None:
        async with session_factory() as session:
            return await session.get(AssetModel, asset_id)

    return _load


@pytest.fixture()
def load_history(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[str], Awaitable[list[AssetStatusHistory]]]:
    """Committed ledger rows of an asset, oldest first."""

    async def _load(asset_id: str) -> list[AssetStatusHistory]:
        async with session_factory() as session:
            result = await session.execute(
                select(AssetStatusHistory)
                .where(AssetStatusHistory.asset_id == asset_id)
                .order_by(AssetStatusHistory.sequence)
            )
            return list(result.scalars().all())

    return _load
