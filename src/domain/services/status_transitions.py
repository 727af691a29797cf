"""
Status transition engine.

Validates requested status changes against the ``TransitionPolicy`` and
writes the asset update plus its ledger entry as one unit of work.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import AssetNotFoundError, InvalidRequestError
from src.domain.transitions import (
    DEFAULT_TRANSITION_POLICY,
    TransitionPolicy,
    retains_assignee,
)
from src.infrastructure.db.models import AssetModel, AssetStatus, AssetStatusHistory
from src.infrastructure.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger()


class StatusTransitionService:
    """Service for validated asset status changes."""

    def __init__(
        self,
        session: AsyncSession,
        policy: TransitionPolicy = DEFAULT_TRANSITION_POLICY,
    ) -> None:
        self.session = session
        self.policy = policy

    async def transition_status(
        self,
        *,
        asset_id: str,
        new_status: AssetStatus,
        changed_by_id: str,
        reason: str | None = None,
    ) -> AssetModel:
        """
        Move an asset to ``new_status``.

        The current assignee is kept only when ``new_status`` is ASSIGNED.
        Moving an unassigned asset to ASSIGNED here leaves it with no
        assignee; use ``AssignmentService.set_assignee`` to assign someone.

        Raises:
            AssetNotFoundError: the asset does not exist.
            StatusUnchangedError: the asset already has ``new_status``.
            InvalidTransitionError: the policy forbids the move.
        """
        async with UnitOfWork(self.session) as uow:
            asset = await uow.assets.get(asset_id, for_update=True)
            if asset is None:
                raise AssetNotFoundError(asset_id)

            try:
                self.policy.ensure_allowed(asset.status, new_status)
            except InvalidRequestError as exc:
                await logger.awarning(
                    "asset_status_change_rejected",
                    asset_id=asset_id,
                    current_status=asset.status.value,
                    requested_status=new_status.value,
                    error=str(exc),
                )
                raise

            await self.apply(
                uow,
                asset,
                new_status=new_status,
                assignee_id=asset.assignee_id,
                changed_by_id=changed_by_id,
                reason=reason or None,
            )

        return await self.load_detail(asset_id)

    async def apply(
        self,
        uow: UnitOfWork,
        asset: AssetModel,
        *,
        new_status: AssetStatus,
        assignee_id: str | None,
        changed_by_id: str,
        reason: str | None,
    ) -> AssetStatusHistory | None:
        """
        Write status and assignee onto a locked asset inside ``uow``.

        The assignee is dropped for every status except ASSIGNED. A ledger
        entry is appended only when the status actually changes. Callers own
        validation; this never consults the policy.
        """
        old_status = asset.status
        old_assignee_id = asset.assignee_id

        asset.status = new_status
        asset.assignee_id = assignee_id if retains_assignee(new_status) else None

        entry: AssetStatusHistory | None = None
        if old_status != new_status:
            entry = await uow.history.append(
                asset_id=asset.id,
                old_status=old_status,
                new_status=new_status,
                changed_by_id=changed_by_id,
                reason=reason,
            )
        await uow.flush()

        await logger.ainfo(
            "asset_status_changed" if entry is not None else "asset_assignment_changed",
            asset_id=asset.id,
            old_status=old_status.value,
            new_status=new_status.value,
            old_assignee_id=old_assignee_id,
            new_assignee_id=asset.assignee_id,
            changed_by_id=changed_by_id,
            history_sequence=entry.sequence if entry is not None else None,
        )
        return entry

    async def load_detail(self, asset_id: str) -> AssetModel:
        async with UnitOfWork(self.session) as uow:
            asset = await uow.assets.get_detail(asset_id)
        if asset is None:
            # Deleted between commit and reload.
            raise AssetNotFoundError(asset_id)
        return asset
