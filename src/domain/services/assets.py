"""
Asset catalogue service.

Create, read, list, edit and delete asset records. Status changes requested
through an edit are delegated to ``StatusTransitionService`` so they are
validated and recorded in the ledger like any other transition.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain.errors import (
    AssetAssignedError,
    AssetNotFoundError,
    SerialNumberConflictError,
)
from src.domain.services.status_transitions import StatusTransitionService
from src.domain.transitions import DEFAULT_TRANSITION_POLICY, TransitionPolicy
from src.infrastructure.db.models import AssetCategory, AssetModel, AssetStatus
from src.infrastructure.repositories.assets import AssetFilters
from src.infrastructure.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger()

EDIT_STATUS_REASON = "Status updated via asset edit"

# Fields an edit may write directly; status goes through the transition engine.
DESCRIPTIVE_FIELDS = (
    "name",
    "description",
    "serial_number",
    "category",
    "purchase_date",
    "purchase_price",
    "vendor",
    "location",
)


@dataclass(slots=True)
class AssetPage:
    """One page of a filtered asset listing."""

    items: Sequence[AssetModel]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


@dataclass(slots=True)
class AssetStats:
    """Dashboard counts."""

    total: int
    by_status: dict[AssetStatus, int]
    recent: Sequence[AssetModel]


class AssetService:
    """Service for asset records."""

    def __init__(
        self,
        session: AsyncSession,
        policy: TransitionPolicy = DEFAULT_TRANSITION_POLICY,
    ) -> None:
        self.session = session
        self.transitions = StatusTransitionService(session, policy)

    async def create_asset(
        self,
        *,
        name: str,
        category: AssetCategory,
        created_by_id: str,
        description: str | None = None,
        serial_number: str | None = None,
        purchase_date: datetime | None = None,
        purchase_price: Decimal | None = None,
        vendor: str | None = None,
        location: str | None = None,
    ) -> AssetModel:
        """Create an AVAILABLE, unassigned asset."""
        async with UnitOfWork(self.session) as uow:
            if serial_number and await uow.assets.get_by_serial(serial_number) is not None:
                raise SerialNumberConflictError(serial_number)

            asset = AssetModel(
                name=name,
                category=category,
                status=AssetStatus.AVAILABLE,
                description=description,
                serial_number=serial_number or None,
                purchase_date=purchase_date,
                purchase_price=purchase_price,
                vendor=vendor,
                location=location,
                created_by_id=created_by_id,
            )
            uow.assets.add(asset)
            await self._flush_unique(uow, serial_number)

        await logger.ainfo(
            "asset_created",
            asset_id=asset.id,
            category=category.value,
            created_by_id=created_by_id,
        )
        return await self.transitions.load_detail(asset.id)

    async def get_asset(self, asset_id: str) -> AssetModel:
        async with UnitOfWork(self.session) as uow:
            asset = await uow.assets.get_detail(asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_id)
        return asset

    async def list_assets(
        self,
        filters: AssetFilters,
        *,
        page: int = 1,
        limit: int | None = None,
    ) -> AssetPage:
        settings = get_settings()
        page = max(1, page)
        limit = min(settings.max_page_size, max(1, limit or settings.default_page_size))

        async with UnitOfWork(self.session) as uow:
            items, total = await uow.assets.search(
                filters, offset=(page - 1) * limit, limit=limit
            )
        return AssetPage(items=items, page=page, limit=limit, total=total)

    async def update_asset(
        self,
        *,
        asset_id: str,
        changes: dict[str, Any],
        changed_by_id: str,
    ) -> AssetModel:
        """
        Apply an edit to an asset.

        ``changes`` holds only the fields the caller sent. A ``status`` that
        differs from the current one must be a legal transition; it is written
        in the same transaction as the descriptive fields.
        """
        async with UnitOfWork(self.session) as uow:
            asset = await uow.assets.get(asset_id, for_update=True)
            if asset is None:
                raise AssetNotFoundError(asset_id)

            serial_number = changes.get("serial_number")
            if serial_number and serial_number != asset.serial_number:
                duplicate = await uow.assets.get_by_serial(serial_number)
                if duplicate is not None and duplicate.id != asset.id:
                    raise SerialNumberConflictError(serial_number)

            for field_name in DESCRIPTIVE_FIELDS:
                if field_name in changes:
                    setattr(asset, field_name, changes[field_name])

            requested_status: AssetStatus | None = changes.get("status")
            if requested_status is not None and requested_status != asset.status:
                self.transitions.policy.ensure_allowed(asset.status, requested_status)
                await self.transitions.apply(
                    uow,
                    asset,
                    new_status=requested_status,
                    assignee_id=asset.assignee_id,
                    changed_by_id=changed_by_id,
                    reason=EDIT_STATUS_REASON,
                )

            await self._flush_unique(uow, serial_number)

        await logger.ainfo(
            "asset_updated",
            asset_id=asset_id,
            changed_by_id=changed_by_id,
            updated_fields=sorted(changes),
        )
        return await self.transitions.load_detail(asset_id)

    async def delete_asset(self, *, asset_id: str, deleted_by_id: str) -> AssetModel:
        """Delete an unassigned asset together with its ledger."""
        async with UnitOfWork(self.session) as uow:
            asset = await uow.assets.get(asset_id, for_update=True)
            if asset is None:
                raise AssetNotFoundError(asset_id)
            if asset.assignee_id is not None:
                raise AssetAssignedError(asset_id)

            await uow.history.delete_for_asset(asset_id)
            await uow.assets.delete(asset)

        await logger.ainfo("asset_deleted", asset_id=asset_id, deleted_by_id=deleted_by_id)
        return asset

    async def get_stats(self) -> AssetStats:
        settings = get_settings()
        async with UnitOfWork(self.session) as uow:
            counts = await uow.assets.count_by_status()
            recent = await uow.assets.recent(settings.recent_assets_limit)

        by_status = {status: counts.get(status, 0) for status in AssetStatus}
        return AssetStats(total=sum(by_status.values()), by_status=by_status, recent=recent)

    async def _flush_unique(self, uow: UnitOfWork, serial_number: str | None) -> None:
        # The pre-check can race with a concurrent writer; the unique index is authoritative.
        try:
            await uow.flush()
        except IntegrityError as exc:
            if serial_number and "serial_number" in str(exc.orig):
                raise SerialNumberConflictError(serial_number) from exc
            raise
