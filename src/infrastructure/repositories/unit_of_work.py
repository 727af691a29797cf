from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from src.infrastructure.repositories.assets import (
    AssetRepository,
    StatusHistoryRepository,
    UserRepository,
)

logger = structlog.get_logger()

T = TypeVar("T")


class UnitOfWork:
    """Transactional handle over one ``AsyncSession``.

    Everything done through the repositories between ``__aenter__`` and
    ``__aexit__`` is committed together, or rolled back together when the
    block raises. The exception is always re-raised.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.assets = AssetRepository(session)
        self.history = StatusHistoryRepository(session)
        self.users = UserRepository(session)

    async def __aenter__(self) -> UnitOfWork:
        logger.debug("uow_enter")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            try:
                await self.commit()
            except Exception:
                await self.rollback()
                raise
        logger.debug("uow_exit", exc_type=exc_type.__name__ if exc_type else None)

    async def run(self, work: Callable[[UnitOfWork], Awaitable[T]]) -> T:
        """Execute ``work`` inside this unit of work and return its result."""
        async with self:
            return await work(self)

    async def flush(self) -> None:
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()
        logger.debug("uow_commit")

    async def rollback(self) -> None:
        await self.session.rollback()
        logger.debug("uow_rollback")
