from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import UserNotFoundError
from src.infrastructure.db.models import AssetModel, UserModel
from src.infrastructure.repositories.unit_of_work import UnitOfWork


@dataclass(slots=True)
class UserProfile:
    user: UserModel
    assigned_assets: Sequence[AssetModel]


class UserDirectoryService:
    """Read-only view of users and what they hold."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_users(self) -> list[tuple[UserModel, int]]:
        """Return every user with the number of assets assigned to them."""
        async with UnitOfWork(self.session) as uow:
            return await uow.users.list_with_assignment_counts()

    async def get_profile(self, user_id: str) -> UserProfile:
        async with UnitOfWork(self.session) as uow:
            user = await uow.users.get(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            assets = await uow.users.assigned_assets(user_id)
        return UserProfile(user=user, assigned_assets=assets)
