from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from src.infrastructure.db.models import (
    AssetCategory,
    AssetModel,
    AssetStatus,
    AssetStatusHistory,
    UserModel,
)

SORTABLE_FIELDS = {
    "name": AssetModel.name,
    "category": AssetModel.category,
    "status": AssetModel.status,
    "created_at": AssetModel.created_at,
    "updated_at": AssetModel.updated_at,
}


@dataclass(slots=True)
class AssetFilters:
    """Query parameters accepted by ``AssetRepository.search``."""

    category: AssetCategory | None = None
    status: AssetStatus | None = None
    assignee_id: str | None = None
    search: str | None = None
    vendor: str | None = None
    location: str | None = None
    sort_by: str = "created_at"
    sort_order: str = "desc"


def _with_people(stmt: Select) -> Select:
    return stmt.options(
        selectinload(AssetModel.assignee),
        selectinload(AssetModel.created_by),
    )


def _contains(column, term: str):
    return column.icontains(term, autoescape=True)


class AssetRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, asset_id: str, *, for_update: bool = False) -> AssetModel | None:
        """Load an asset row.

        ``for_update`` takes a row lock for the rest of the transaction and
        overwrites any copy already held in the identity map, so status checks
        always see the committed state.
        """
        stmt = select(AssetModel).where(AssetModel.id == asset_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return await self.session.scalar(stmt)

    async def get_detail(self, asset_id: str) -> AssetModel | None:
        """Load an asset with assignee and creator resolved."""
        stmt = _with_people(select(AssetModel).where(AssetModel.id == asset_id)).execution_options(
            populate_existing=True
        )
        return await self.session.scalar(stmt)

    async def get_by_serial(self, serial_number: str) -> AssetModel | None:
        return await self.session.scalar(
            select(AssetModel).where(AssetModel.serial_number == serial_number)
        )

    def add(self, asset: AssetModel) -> None:
        self.session.add(asset)

    async def delete(self, asset: AssetModel) -> None:
        await self.session.delete(asset)

    async def search(
        self, filters: AssetFilters, *, offset: int, limit: int
    ) -> tuple[Sequence[AssetModel], int]:
        """Return one page of matching assets plus the total match count."""
        conditions = []
        if filters.category:
            conditions.append(AssetModel.category == filters.category)
        if filters.status:
            conditions.append(AssetModel.status == filters.status)
        if filters.assignee_id:
            conditions.append(AssetModel.assignee_id == filters.assignee_id)
        if filters.vendor:
            conditions.append(_contains(AssetModel.vendor, filters.vendor))
        if filters.location:
            conditions.append(_contains(AssetModel.location, filters.location))
        if filters.search:
            # Every term has to hit at least one searchable field.
            for term in filters.search.split():
                conditions.append(
                    or_(
                        _contains(AssetModel.name, term),
                        _contains(AssetModel.description, term),
                        _contains(AssetModel.serial_number, term),
                        _contains(AssetModel.vendor, term),
                        _contains(AssetModel.location, term),
                        AssetModel.assignee.has(_contains(UserModel.name, term)),
                    )
                )

        total = await self.session.scalar(
            select(func.count(AssetModel.id)).where(*conditions)
        )

        sort_column = SORTABLE_FIELDS.get(filters.sort_by, AssetModel.created_at)
        order = sort_column.asc() if filters.sort_order == "asc" else sort_column.desc()
        stmt = (
            _with_people(select(AssetModel).where(*conditions))
            .order_by(order, AssetModel.id)
            .offset(offset)
            .limit(limit)
        )
        assets = (await self.session.execute(stmt)).scalars().all()
        return assets, total or 0

    async def count_by_status(self) -> dict[AssetStatus, int]:
        rows = (
            await self.session.execute(
                select(AssetModel.status, func.count(AssetModel.id)).group_by(AssetModel.status)
            )
        ).all()
        return {status: count for status, count in rows}

    async def recent(self, limit: int) -> Sequence[AssetModel]:
        stmt = (
            _with_people(select(AssetModel))
            .order_by(AssetModel.created_at.desc(), AssetModel.id)
            .limit(limit)
        )
        return (await self.session.execute(stmt)).scalars().all()


class StatusHistoryRepository:
    """Append-only access to ``asset_status_history``."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def next_sequence(self, asset_id: str) -> int:
        current = await self.session.scalar(
            select(func.max(AssetStatusHistory.sequence)).where(
                AssetStatusHistory.asset_id == asset_id
            )
        )
        return (current or 0) + 1

    async def append(
        self,
        *,
        asset_id: str,
        old_status: AssetStatus,
        new_status: AssetStatus,
        changed_by_id: str,
        reason: str | None,
    ) -> AssetStatusHistory:
        entry = AssetStatusHistory(
            asset_id=asset_id,
            sequence=await self.next_sequence(asset_id),
            old_status=old_status,
            new_status=new_status,
            changed_by_id=changed_by_id,
            reason=reason,
        )
        self.session.add(entry)
        return entry

    async def list_for_asset(self, asset_id: str) -> Sequence[AssetStatusHistory]:
        stmt = (
            select(AssetStatusHistory)
            .where(AssetStatusHistory.asset_id == asset_id)
            .options(selectinload(AssetStatusHistory.changed_by))
            .order_by(AssetStatusHistory.sequence.desc(), AssetStatusHistory.created_at.desc())
        )
        return (await self.session.execute(stmt)).scalars().all()

    async def delete_for_asset(self, asset_id: str) -> None:
        await self.session.execute(
            delete(AssetStatusHistory).where(AssetStatusHistory.asset_id == asset_id)
        )


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: str) -> UserModel | None:
        return await self.session.get(UserModel, user_id)

    async def exists(self, user_id: str) -> bool:
        found = await self.session.scalar(select(UserModel.id).where(UserModel.id == user_id))
        return found is not None

    async def list_with_assignment_counts(self) -> list[tuple[UserModel, int]]:
        stmt = (
            select(UserModel, func.count(AssetModel.id))
            .outerjoin(AssetModel, AssetModel.assignee_id == UserModel.id)
            .group_by(UserModel.id)
            .order_by(UserModel.created_at.desc(), UserModel.id)
        )
        return [(user, count) for user, count in (await self.session.execute(stmt)).all()]

    async def assigned_assets(self, user_id: str) -> Sequence[AssetModel]:
        stmt = (
            select(AssetModel)
            .where(
                AssetModel.assignee_id == user_id,
                AssetModel.status == AssetStatus.ASSIGNED,
            )
            .order_by(AssetModel.updated_at.desc(), AssetModel.id)
        )
        return (await self.session.execute(stmt)).scalars().all()
