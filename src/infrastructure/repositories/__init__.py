from src.infrastructure.repositories.assets import (
    AssetFilters,
    AssetRepository,
    StatusHistoryRepository,
    UserRepository,
)
from src.infrastructure.repositories.unit_of_work import UnitOfWork

__all__ = [
    "AssetFilters",
    "AssetRepository",
    "StatusHistoryRepository",
    "UnitOfWork",
    "UserRepository",
]
