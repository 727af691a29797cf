"""Typed failures raised by the asset services.

Routes translate these into HTTP responses: ``NotFoundError`` to 404,
``InvalidRequestError`` to 400 and ``ConflictError`` to 409.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.infrastructure.db.models import AssetStatus


class AssetTrackerError(Exception):
    """Base exception for asset tracking errors."""


class NotFoundError(AssetTrackerError):
    """A referenced record does not exist."""


class AssetNotFoundError(NotFoundError):
    """Raised when asset does not exist."""

    def __init__(self, asset_id: str) -> None:
        super().__init__("Asset not found")
        self.asset_id = asset_id


class AssigneeNotFoundError(NotFoundError):
    """Raised when the user an asset is being assigned to does not exist."""

    def __init__(self, assignee_id: str) -> None:
        super().__init__("Assignee not found")
        self.assignee_id = assignee_id


class UserNotFoundError(NotFoundError):
    """Raised when the authenticated caller has no user record."""

    def __init__(self, user_id: str) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class InvalidRequestError(AssetTrackerError):
    """The operation is not legal given the asset's current state."""


class StatusUnchangedError(InvalidRequestError):
    """Raised when the requested status equals the current one."""

    def __init__(self, status: AssetStatus) -> None:
        super().__init__("Asset already has this status")
        self.status = status


class InvalidTransitionError(InvalidRequestError):
    """Raised when the transition policy has no edge between two statuses."""

    def __init__(self, current: AssetStatus, requested: AssetStatus) -> None:
        super().__init__(f"Cannot change status from {current.value} to {requested.value}")
        self.current = current
        self.requested = requested


class AssetAssignedError(InvalidRequestError):
    """Raised when deleting an asset that is still assigned."""

    def __init__(self, asset_id: str) -> None:
        super().__init__("Cannot delete assigned asset")
        self.asset_id = asset_id


class ConflictError(AssetTrackerError):
    """A uniqueness rule would be violated."""


class SerialNumberConflictError(ConflictError):
    """Raised when another asset already carries the serial number."""

    def __init__(self, serial_number: str | None) -> None:
        super().__init__("Serial number already exists")
        self.serial_number = serial_number
