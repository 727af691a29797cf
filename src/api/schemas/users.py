from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from src.infrastructure.db.models import AssetCategory, AssetStatus


class UserListItem(BaseModel):
    id: str
    email: str
    name: str
    role: str
    created_at: datetime
    updated_at: datetime
    assigned_asset_count: int


class AssignedAsset(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: AssetCategory
    description: str | None = None
    status: AssetStatus
    serial_number: str | None = None


class UserProfileResponse(BaseModel):
    id: str
    email: str
    name: str
    role: str
    created_at: datetime
    updated_at: datetime
    assigned_assets: list[AssignedAsset]
