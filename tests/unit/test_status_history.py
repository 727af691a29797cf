from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import AssetNotFoundError
from src.domain.services.status_history import StatusHistoryService
from src.domain.services.status_transitions import StatusTransitionService
from src.infrastructure.db.models import AssetStatus

from tests.utils import ADMIN_ID, MANAGER_ID

A = AssetStatus


async def test_history_is_returned_newest_first(
    session: AsyncSession, asset_factory
) -> None:
    asset = await asset_factory(status=A.AVAILABLE)
    transitions = StatusTransitionService(session)
    for target, actor in (
        (A.MAINTENANCE, ADMIN_ID),
        (A.AVAILABLE, MANAGER_ID),
        (A.LOST, ADMIN_ID),
    ):
        await transitions.transition_status(
            asset_id=asset.id, new_status=target, changed_by_id=actor
        )

    history = await StatusHistoryService(session).list_history(asset.id)

    assert [entry.new_status for entry in history] == [A.LOST, A.AVAILABLE, A.MAINTENANCE]
    assert [entry.sequence for entry in history] == [3, 2, 1]
    # Each entry starts where the previous one ended.
    for newer, older in zip(history, history[1:]):
        assert newer.old_status is older.new_status


async def test_history_resolves_actor(session: AsyncSession, asset_factory) -> None:
    asset = await asset_factory(status=A.AVAILABLE)
    await StatusTransitionService(session).transition_status(
        asset_id=asset.id, new_status=A.MAINTENANCE, changed_by_id=MANAGER_ID, reason="fan noise"
    )

    (entry,) = await StatusHistoryService(session).list_history(asset.id)

    assert entry.changed_by is not None
    assert entry.changed_by.name == "Max Manager"
    assert entry.reason == "fan noise"


async def test_untouched_asset_has_empty_history(
    session: AsyncSession, asset_factory
) -> None:
    asset = await asset_factory()

    assert list(await StatusHistoryService(session).list_history(asset.id)) == []


async def test_history_of_unknown_asset_raises(session: AsyncSession) -> None:
    with pytest.raises(AssetNotFoundError):
        await StatusHistoryService(session).list_history("missing-asset")
