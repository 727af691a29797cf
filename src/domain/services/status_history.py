from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import AssetNotFoundError
from src.infrastructure.db.models import AssetStatusHistory
from src.infrastructure.repositories.unit_of_work import UnitOfWork


class StatusHistoryService:
    """Read access to the status ledger."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_history(self, asset_id: str) -> Sequence[AssetStatusHistory]:
        """Return the asset's ledger newest first; empty when it never changed status."""
        async with UnitOfWork(self.session) as uow:
            if await uow.assets.get(asset_id) is None:
                raise AssetNotFoundError(asset_id)
            return await uow.history.list_for_asset(asset_id)
