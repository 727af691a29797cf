"""User routes - directory listing and the caller's own profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session, require_roles
from src.api.schemas.users import AssignedAsset, UserListItem, UserProfileResponse
from src.core.auth import ASSET_EDITOR_ROLES
from src.domain import User
from src.domain.errors import UserNotFoundError
from src.domain.services.users import UserDirectoryService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserListItem])
async def list_users(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_roles(ASSET_EDITOR_ROLES)),
) -> list[UserListItem]:
    """List users with how many assets each holds (admin/manager)."""
    rows = await UserDirectoryService(session).list_users()
    return [
        UserListItem(
            id=record.id,
            email=record.email,
            name=record.name,
            role=record.role.value,
            created_at=record.created_at,
            updated_at=record.updated_at,
            assigned_asset_count=count,
        )
        for record, count in rows
    ]


@router.get("/me", response_model=UserProfileResponse)
async def get_me(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> UserProfileResponse:
    """Current user's profile and the assets assigned to them."""
    try:
        profile = await UserDirectoryService(session).get_profile(user.user_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    record = profile.user
    return UserProfileResponse(
        id=record.id,
        email=record.email,
        name=record.name,
        role=record.role.value,
        created_at=record.created_at,
        updated_at=record.updated_at,
        assigned_assets=[AssignedAsset.model_validate(asset) for asset in profile.assigned_assets],
    )
