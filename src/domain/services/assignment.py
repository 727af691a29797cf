"""Assignment coordinator: assign or unassign an asset and derive its status."""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import AssetNotFoundError, AssigneeNotFoundError
from src.domain.services.status_transitions import StatusTransitionService
from src.domain.transitions import DEFAULT_TRANSITION_POLICY, TransitionPolicy, status_for_assignee
from src.infrastructure.db.models import AssetModel
from src.infrastructure.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger()

ASSIGNED_REASON = "Asset assigned to user"
UNASSIGNED_REASON = "Asset unassigned from user"


class AssignmentService:
    """Service for asset assignment.

    Assignment bypasses the transition table: assigning always yields
    ASSIGNED and unassigning always yields AVAILABLE, whatever the current
    status is.
    """

    def __init__(
        self,
        session: AsyncSession,
        policy: TransitionPolicy = DEFAULT_TRANSITION_POLICY,
    ) -> None:
        self.session = session
        self.transitions = StatusTransitionService(session, policy)

    async def set_assignee(
        self,
        *,
        asset_id: str,
        assignee_id: str | None,
        changed_by_id: str,
    ) -> AssetModel:
        """
        Assign ``asset_id`` to ``assignee_id``, or unassign it when ``None``.

        Raises:
            AssetNotFoundError: the asset does not exist.
            AssigneeNotFoundError: ``assignee_id`` names no user.
        """
        async with UnitOfWork(self.session) as uow:
            asset = await uow.assets.get(asset_id, for_update=True)
            if asset is None:
                raise AssetNotFoundError(asset_id)

            if assignee_id is not None and not await uow.users.exists(assignee_id):
                await logger.awarning(
                    "asset_assignee_not_found",
                    asset_id=asset_id,
                    assignee_id=assignee_id,
                )
                raise AssigneeNotFoundError(assignee_id)

            await self.transitions.apply(
                uow,
                asset,
                new_status=status_for_assignee(assignee_id),
                assignee_id=assignee_id,
                changed_by_id=changed_by_id,
                reason=ASSIGNED_REASON if assignee_id is not None else UNASSIGNED_REASON,
            )

        return await self.transitions.load_detail(asset_id)
