from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from src.infrastructure.db.models import AssetCategory, AssetStatus


class UserSummary(BaseModel):
    """Identity of a user referenced by an asset or ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str


class AssetDetail(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    serial_number: str | None = None
    category: AssetCategory
    status: AssetStatus
    purchase_date: datetime | None = None
    purchase_price: Decimal | None = None
    vendor: str | None = None
    location: str | None = None
    assignee_id: str | None = None
    created_by_id: str
    assignee: UserSummary | None = None
    created_by: UserSummary | None = None
    created_at: datetime
    updated_at: datetime


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AssetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    serial_number: str | None = Field(None, max_length=128)
    category: AssetCategory
    purchase_date: datetime | None = None
    purchase_price: Decimal | None = Field(None, gt=0)
    vendor: str | None = Field(None, max_length=255)
    location: str | None = Field(None, max_length=255)

    @field_validator("serial_number")
    @classmethod
    def _normalize_serial(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


class AssetUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    serial_number: str | None = Field(None, max_length=128)
    category: AssetCategory | None = None
    status: AssetStatus | None = None
    purchase_date: datetime | None = None
    purchase_price: Decimal | None = Field(None, gt=0)
    vendor: str | None = Field(None, max_length=255)
    location: str | None = Field(None, max_length=255)

    @field_validator("serial_number")
    @classmethod
    def _normalize_serial(cls, value: str | None) -> str | None:
        return _blank_to_none(value)

    # May be omitted, but an explicit null would blank a NOT NULL column.
    @field_validator("name", "category")
    @classmethod
    def _reject_null(cls, value: str | AssetCategory | None) -> str | AssetCategory:
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class AssignRequest(BaseModel):
    assignee_id: str | None = Field(
        ..., description="User to assign the asset to, or null to unassign"
    )


class StatusChangeRequest(BaseModel):
    status: AssetStatus
    reason: str | None = Field(None, max_length=1000)


class StatusHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    asset_id: str
    old_status: AssetStatus
    new_status: AssetStatus
    reason: str | None = None
    changed_by_id: str
    changed_by: UserSummary | None = None
    created_at: datetime


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class AssetListResponse(BaseModel):
    assets: list[AssetDetail]
    pagination: Pagination


class StatusCounts(BaseModel):
    total: int
    available: int
    assigned: int
    maintenance: int
    retired: int
    lost: int


class AssetStatsResponse(BaseModel):
    stats: StatusCounts
    recent_assets: list[AssetDetail]


class DeletedAsset(BaseModel):
    id: str
    name: str


class AssetDeleteResponse(BaseModel):
    message: str = "Asset deleted successfully"
    deleted_asset: DeletedAsset
