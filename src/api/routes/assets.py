"""Asset routes - catalogue, assignment, status transitions and history."""

from __future__ import annotations

from typing import Literal

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session, get_transition_policy, require_roles
from src.api.schemas.assets import (
    AssetCreate,
    AssetDeleteResponse,
    AssetDetail,
    AssetListResponse,
    AssetStatsResponse,
    AssetUpdate,
    AssignRequest,
    DeletedAsset,
    Pagination,
    StatusChangeRequest,
    StatusCounts,
    StatusHistoryItem,
)
from src.core.auth import ASSET_EDITOR_ROLES, Role
from src.domain import User
from src.domain.errors import (
    AssetNotFoundError,
    AssetTrackerError,
    ConflictError,
    InvalidRequestError,
    NotFoundError,
)
from src.domain.services.assets import AssetService
from src.domain.services.assignment import AssignmentService
from src.domain.services.status_history import StatusHistoryService
from src.domain.services.status_transitions import StatusTransitionService
from src.domain.transitions import TransitionPolicy
from src.infrastructure.db.models import AssetCategory, AssetStatus
from src.infrastructure.repositories.assets import AssetFilters

logger = structlog.get_logger()
router = APIRouter(prefix="/assets", tags=["Assets"])


def _to_http(exc: AssetTrackerError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InvalidRequestError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/stats", response_model=AssetStatsResponse, summary="Dashboard counts")
async def get_stats(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> AssetStatsResponse:
    """Return asset counts per status and the most recently created assets."""
    stats = await AssetService(session).get_stats()
    counts = {state.value.lower(): count for state, count in stats.by_status.items()}
    return AssetStatsResponse(
        stats=StatusCounts(total=stats.total, **counts),
        recent_assets=[AssetDetail.model_validate(asset) for asset in stats.recent],
    )


@router.get("", response_model=AssetListResponse, summary="List assets")
async def list_assets(
    category: AssetCategory | None = None,
    asset_status: AssetStatus | None = Query(None, alias="status"),
    assignee: str | None = None,
    search: str | None = None,
    vendor: str | None = None,
    location: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    sort_by: Literal["name", "category", "status", "created_at", "updated_at"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> AssetListResponse:
    """Filter, search and paginate assets."""
    filters = AssetFilters(
        category=category,
        status=asset_status,
        assignee_id=assignee,
        search=search.strip() if search else None,
        vendor=vendor,
        location=location,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = await AssetService(session).list_assets(filters, page=page, limit=limit)
    return AssetListResponse(
        assets=[AssetDetail.model_validate(asset) for asset in result.items],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
            has_next=result.has_next,
            has_prev=result.has_prev,
        ),
    )


@router.post("", response_model=AssetDetail, status_code=status.HTTP_201_CREATED)
async def create_asset(
    payload: AssetCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles(ASSET_EDITOR_ROLES)),
) -> AssetDetail:
    """Create a new asset (admin/manager)."""
    try:
        asset = await AssetService(session).create_asset(
            created_by_id=user.user_id,
            **payload.model_dump(),
        )
    except AssetTrackerError as exc:
        raise _to_http(exc) from exc

    return AssetDetail.model_validate(asset)


@router.get("/{asset_id}", response_model=AssetDetail)
async def get_asset(
    asset_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> AssetDetail:
    try:
        asset = await AssetService(session).get_asset(asset_id)
    except AssetNotFoundError as exc:
        raise _to_http(exc) from exc
    return AssetDetail.model_validate(asset)


@router.put("/{asset_id}", response_model=AssetDetail)
async def update_asset(
    asset_id: str,
    payload: AssetUpdate,
    session: AsyncSession = Depends(get_db_session),
    policy: TransitionPolicy = Depends(get_transition_policy),
    user: User = Depends(require_roles(ASSET_EDITOR_ROLES)),
) -> AssetDetail:
    """Edit asset fields (admin/manager). A changed status must be a legal transition."""
    try:
        asset = await AssetService(session, policy).update_asset(
            asset_id=asset_id,
            changes=payload.model_dump(exclude_unset=True),
            changed_by_id=user.user_id,
        )
    except AssetTrackerError as exc:
        raise _to_http(exc) from exc

    return AssetDetail.model_validate(asset)


@router.patch("/{asset_id}/assign", response_model=AssetDetail)
async def assign_asset(
    asset_id: str,
    payload: AssignRequest,
    session: AsyncSession = Depends(get_db_session),
    policy: TransitionPolicy = Depends(get_transition_policy),
    user: User = Depends(require_roles(ASSET_EDITOR_ROLES)),
) -> AssetDetail:
    """Assign an asset to a user, or unassign it with ``assignee_id: null``."""
    try:
        asset = await AssignmentService(session, policy).set_assignee(
            asset_id=asset_id,
            assignee_id=payload.assignee_id,
            changed_by_id=user.user_id,
        )
    except AssetTrackerError as exc:
        raise _to_http(exc) from exc

    logger.info(
        "asset_assign_request",
        asset_id=asset_id,
        assignee_id=payload.assignee_id,
        acting_user=user.user_id,
    )
    return AssetDetail.model_validate(asset)


@router.patch("/{asset_id}/status", response_model=AssetDetail)
async def change_status(
    asset_id: str,
    payload: StatusChangeRequest,
    session: AsyncSession = Depends(get_db_session),
    policy: TransitionPolicy = Depends(get_transition_policy),
    user: User = Depends(require_roles(ASSET_EDITOR_ROLES)),
) -> AssetDetail:
    """Move an asset to a new status and record it in the status history."""
    try:
        asset = await StatusTransitionService(session, policy).transition_status(
            asset_id=asset_id,
            new_status=payload.status,
            changed_by_id=user.user_id,
            reason=payload.reason,
        )
    except AssetTrackerError as exc:
        raise _to_http(exc) from exc

    logger.info(
        "asset_status_request",
        asset_id=asset_id,
        new_status=payload.status.value,
        acting_user=user.user_id,
    )
    return AssetDetail.model_validate(asset)


@router.get("/{asset_id}/status-history", response_model=list[StatusHistoryItem])
async def get_status_history(
    asset_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> list[StatusHistoryItem]:
    """Status changes of an asset, newest first."""
    try:
        entries = await StatusHistoryService(session).list_history(asset_id)
    except AssetNotFoundError as exc:
        raise _to_http(exc) from exc
    return [StatusHistoryItem.model_validate(entry) for entry in entries]


@router.delete("/{asset_id}", response_model=AssetDeleteResponse)
async def delete_asset(
    asset_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles([Role.ADMIN.value])),
) -> AssetDeleteResponse:
    """Delete an unassigned asset and its status history (admin-only)."""
    try:
        asset = await AssetService(session).delete_asset(
            asset_id=asset_id, deleted_by_id=user.user_id
        )
    except AssetTrackerError as exc:
        raise _to_http(exc) from exc

    return AssetDeleteResponse(deleted_asset=DeletedAsset(id=asset.id, name=asset.name))
