from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class UserRole(str, enum.Enum):
    """User role enum matching auth.Role."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class AssetCategory(str, enum.Enum):
    HARDWARE = "HARDWARE"
    SOFTWARE = "SOFTWARE"
    FURNITURE = "FURNITURE"
    VEHICLE = "VEHICLE"
    OTHER = "OTHER"


class AssetStatus(str, enum.Enum):
    """Asset lifecycle status.

    Legal moves between these values are defined by
    ``src.domain.transitions.TransitionPolicy``.
    """

    AVAILABLE = "AVAILABLE"
    ASSIGNED = "ASSIGNED"
    MAINTENANCE = "MAINTENANCE"
    RETIRED = "RETIRED"
    LOST = "LOST"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=_enum_values),
        default=UserRole.USER,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    assigned_assets: Mapped[list[AssetModel]] = relationship(
        back_populates="assignee",
        foreign_keys="AssetModel.assignee_id",
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email}, role={self.role.value})>"


class AssetModel(Base):
    """Current state of a tracked asset."""

    __tablename__ = "assets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    serial_number: Mapped[str | None] = mapped_column(String(128), unique=True, nullable=True)
    category: Mapped[AssetCategory] = mapped_column(
        Enum(AssetCategory, name="asset_category", values_callable=_enum_values),
        nullable=False,
        index=True,
    )
    status: Mapped[AssetStatus] = mapped_column(
        Enum(AssetStatus, name="asset_status", values_callable=_enum_values),
        default=AssetStatus.AVAILABLE,
        nullable=False,
        index=True,
    )
    purchase_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    purchase_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    vendor: Mapped[str | None] = mapped_column(String(255))
    location: Mapped[str | None] = mapped_column(String(255))
    assignee_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_by_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    assignee: Mapped[UserModel | None] = relationship(
        back_populates="assigned_assets",
        foreign_keys=[assignee_id],
    )
    created_by: Mapped[UserModel] = relationship(foreign_keys=[created_by_id])
    status_history: Mapped[list[AssetStatusHistory]] = relationship(
        back_populates="asset",
        order_by="AssetStatusHistory.sequence.desc()",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<AssetModel(id={self.id}, name={self.name}, status={self.status.value})>"


class AssetStatusHistory(Base):
    """Append-only ledger row written for every status change.

    ``sequence`` is allocated per asset while the asset row is locked, so it
    follows commit order even when ``created_at`` values collide.
    """

    __tablename__ = "asset_status_history"
    __table_args__ = (
        UniqueConstraint("asset_id", "sequence", name="uq_asset_status_history_sequence"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    asset_id: Mapped[str] = mapped_column(
        ForeignKey("assets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    old_status: Mapped[AssetStatus] = mapped_column(
        Enum(AssetStatus, name="asset_status", values_callable=_enum_values),
        nullable=False,
    )
    new_status: Mapped[AssetStatus] = mapped_column(
        Enum(AssetStatus, name="asset_status", values_callable=_enum_values),
        nullable=False,
    )
    reason: Mapped[str | None] = mapped_column(Text)
    changed_by_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    asset: Mapped[AssetModel] = relationship(back_populates="status_history")
    changed_by: Mapped[UserModel | None] = relationship()
