from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from src.infrastructure.db.models import AssetCategory, AssetModel
from src.infrastructure.repositories import UnitOfWork

from tests.utils import ADMIN_ID


def _asset(name: str) -> AssetModel:
    return AssetModel(name=name, category=AssetCategory.OTHER, created_by_id=ADMIN_ID)


async def test_unit_of_work_commits_on_success(session: AsyncSession, load_asset) -> None:
    asset = _asset("Projector")

    async with UnitOfWork(session) as uow:
        uow.assets.add(asset)

    assert await load_asset(asset.id) is not None


async def test_unit_of_work_rolls_back_on_error(session: AsyncSession, load_asset) -> None:
    asset = _asset("Projector")

    with pytest.raises(RuntimeError):
        async with UnitOfWork(session) as uow:
            uow.assets.add(asset)
            await uow.flush()
            raise RuntimeError("boom")

    assert await load_asset(asset.id) is None


async def test_run_returns_result_of_work(session: AsyncSession, load_asset) -> None:
    async def work(uow: UnitOfWork) -> str:
        asset = _asset("Whiteboard")
        uow.assets.add(asset)
        await uow.flush()
        return asset.id

    asset_id = await UnitOfWork(session).run(work)

    stored = await load_asset(asset_id)
    assert stored is not None
    assert stored.name == "Whiteboard"
