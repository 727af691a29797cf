"""Domain services."""

from src.domain.services.assets import AssetPage, AssetService, AssetStats
from src.domain.services.assignment import AssignmentService
from src.domain.services.status_history import StatusHistoryService
from src.domain.services.status_transitions import StatusTransitionService
from src.domain.services.users import UserDirectoryService, UserProfile

__all__ = [
    "AssetPage",
    "AssetService",
    "AssetStats",
    "AssignmentService",
    "StatusHistoryService",
    "StatusTransitionService",
    "UserDirectoryService",
    "UserProfile",
]
