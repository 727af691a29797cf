from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import (
    AssetAssignedError,
    AssetNotFoundError,
    InvalidTransitionError,
    SerialNumberConflictError,
)
from src.domain.services.assets import EDIT_STATUS_REASON, AssetService
from src.infrastructure.db.models import AssetCategory, AssetStatus
from src.infrastructure.repositories import AssetFilters

from tests.utils import ADMIN_ID, MANAGER_ID, STAFF_ID, STAFF_TWO_ID

A = AssetStatus


async def test_create_asset_starts_available(session: AsyncSession, load_history) -> None:
    asset = await AssetService(session).create_asset(
        name="Dell U2720Q",
        category=AssetCategory.HARDWARE,
        created_by_id=MANAGER_ID,
        serial_number="MON-001",
        purchase_price=Decimal("499.00"),
        vendor="Dell",
    )

    assert asset.status is A.AVAILABLE
    assert asset.assignee_id is None
    assert asset.created_by is not None
    assert asset.created_by.name == "Max Manager"
    assert asset.purchase_price == Decimal("499.00")
    assert await load_history(asset.id) == []


async def test_create_asset_rejects_duplicate_serial(
    session: AsyncSession, asset_factory
) -> None:
    await asset_factory(serial_number="SN-1")

    with pytest.raises(SerialNumberConflictError, match="Serial number already exists"):
        await AssetService(session).create_asset(
            name="Copy",
            category=AssetCategory.HARDWARE,
            created_by_id=ADMIN_ID,
            serial_number="SN-1",
        )


async def test_get_asset_unknown_raises(session: AsyncSession) -> None:
    with pytest.raises(AssetNotFoundError):
        await AssetService(session).get_asset("missing-asset")


async def test_update_descriptive_fields_only(
    session: AsyncSession, asset_factory, load_asset, load_history
) -> None:
    asset = await asset_factory(status=A.ASSIGNED, assignee_id=STAFF_ID)

    updated = await AssetService(session).update_asset(
        asset_id=asset.id,
        changes={"name": "ThinkPad X1 Gen 11", "location": "HQ-3"},
        changed_by_id=ADMIN_ID,
    )

    assert updated.name == "ThinkPad X1 Gen 11"
    assert updated.location == "HQ-3"
    stored = await load_asset(asset.id)
    assert stored is not None
    assert (stored.status, stored.assignee_id) == (A.ASSIGNED, STAFF_ID)
    assert await load_history(asset.id) == []


async def test_update_with_status_goes_through_transition_engine(
    session: AsyncSession, asset_factory, load_asset, load_history
) -> None:
    asset = await asset_factory(status=A.ASSIGNED, assignee_id=STAFF_ID)

    updated = await AssetService(session).update_asset(
        asset_id=asset.id,
        changes={"status": A.MAINTENANCE, "location": "Repair shop"},
        changed_by_id=MANAGER_ID,
    )

    assert updated.status is A.MAINTENANCE
    assert updated.assignee_id is None
    stored = await load_asset(asset.id)
    assert stored is not None
    assert stored.location == "Repair shop"

    (entry,) = await load_history(asset.id)
    assert (entry.old_status, entry.new_status) == (A.ASSIGNED, A.MAINTENANCE)
    assert entry.reason == EDIT_STATUS_REASON
    assert entry.changed_by_id == MANAGER_ID


async def test_update_with_same_status_is_not_an_error(
    session: AsyncSession, asset_factory, load_history
) -> None:
    asset = await asset_factory(status=A.AVAILABLE)

    updated = await AssetService(session).update_asset(
        asset_id=asset.id,
        changes={"status": A.AVAILABLE, "vendor": "Lenovo"},
        changed_by_id=ADMIN_ID,
    )

    assert updated.vendor == "Lenovo"
    assert await load_history(asset.id) == []


async def test_illegal_status_in_update_discards_whole_edit(
    session: AsyncSession, asset_factory, load_asset, load_history
) -> None:
    asset = await asset_factory(name="Old name", status=A.RETIRED)

    with pytest.raises(InvalidTransitionError):
        await AssetService(session).update_asset(
            asset_id=asset.id,
            changes={"name": "New name", "status": A.MAINTENANCE},
            changed_by_id=ADMIN_ID,
        )

    stored = await load_asset(asset.id)
    assert stored is not None
    assert (stored.name, stored.status) == ("Old name", A.RETIRED)
    assert await load_history(asset.id) == []


async def test_update_rejects_serial_of_another_asset(
    session: AsyncSession, asset_factory
) -> None:
    await asset_factory(serial_number="SN-A")
    asset = await asset_factory(serial_number="SN-B")

    with pytest.raises(SerialNumberConflictError):
        await AssetService(session).update_asset(
            asset_id=asset.id, changes={"serial_number": "SN-A"}, changed_by_id=ADMIN_ID
        )


async def test_delete_assigned_asset_is_refused(
    session: AsyncSession, asset_factory, load_asset
) -> None:
    asset = await asset_factory(status=A.ASSIGNED, assignee_id=STAFF_ID)

    with pytest.raises(AssetAssignedError, match="Cannot delete assigned asset"):
        await AssetService(session).delete_asset(asset_id=asset.id, deleted_by_id=ADMIN_ID)

    assert await load_asset(asset.id) is not None


async def test_delete_removes_asset_and_history(
    session: AsyncSession, asset_factory, load_asset, load_history
) -> None:
    asset = await asset_factory(status=A.AVAILABLE)
    service = AssetService(session)
    await service.update_asset(
        asset_id=asset.id, changes={"status": A.LOST}, changed_by_id=ADMIN_ID
    )

    deleted = await service.delete_asset(asset_id=asset.id, deleted_by_id=ADMIN_ID)

    assert deleted.id == asset.id
    assert await load_asset(asset.id) is None
    assert await load_history(asset.id) == []


async def test_list_assets_filters_and_paginates(
    session: AsyncSession, asset_factory
) -> None:
    for index in range(3):
        await asset_factory(name=f"Laptop {index}", vendor="Lenovo")
    await asset_factory(
        name="Office chair", category=AssetCategory.FURNITURE, vendor="Herman Miller"
    )
    await asset_factory(name="Desk phone", status=A.ASSIGNED, assignee_id=STAFF_TWO_ID)

    service = AssetService(session)

    page = await service.list_assets(AssetFilters(vendor="lenovo"), page=1, limit=2)
    assert page.total == 3
    assert len(page.items) == 2
    assert (page.total_pages, page.has_next, page.has_prev) == (2, True, False)

    second = await service.list_assets(AssetFilters(vendor="lenovo"), page=2, limit=2)
    assert len(second.items) == 1
    assert (second.has_next, second.has_prev) == (False, True)

    furniture = await service.list_assets(AssetFilters(category=AssetCategory.FURNITURE))
    assert [asset.name for asset in furniture.items] == ["Office chair"]

    assigned = await service.list_assets(AssetFilters(status=A.ASSIGNED))
    assert [asset.name for asset in assigned.items] == ["Desk phone"]


async def test_search_matches_assignee_name(session: AsyncSession, asset_factory) -> None:
    await asset_factory(name="Desk phone", status=A.ASSIGNED, assignee_id=STAFF_TWO_ID)
    await asset_factory(name="Spare phone")

    page = await AssetService(session).list_assets(AssetFilters(search="riley"))

    assert [asset.name for asset in page.items] == ["Desk phone"]
    assert page.items[0].assignee is not None


async def test_search_requires_every_term(session: AsyncSession, asset_factory) -> None:
    await asset_factory(name="MacBook Pro", location="Berlin")
    await asset_factory(name="MacBook Air", location="Lisbon")

    page = await AssetService(session).list_assets(AssetFilters(search="macbook berlin"))

    assert [asset.name for asset in page.items] == ["MacBook Pro"]


async def test_list_clamps_page_size(session: AsyncSession, asset_factory) -> None:
    await asset_factory()

    page = await AssetService(session).list_assets(AssetFilters(), page=0, limit=10_000)

    assert page.page == 1
    assert page.limit == 100


async def test_stats_count_every_status(session: AsyncSession, asset_factory) -> None:
    await asset_factory(status=A.AVAILABLE)
    await asset_factory(status=A.AVAILABLE)
    await asset_factory(status=A.ASSIGNED, assignee_id=STAFF_ID)
    await asset_factory(status=A.LOST)

    stats = await AssetService(session).get_stats()

    assert stats.total == 4
    assert stats.by_status == {
        A.AVAILABLE: 2,
        A.ASSIGNED: 1,
        A.MAINTENANCE: 0,
        A.RETIRED: 0,
        A.LOST: 1,
    }
    assert len(stats.recent) == 4
