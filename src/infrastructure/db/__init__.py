from . import models  # noqa: F401
from .base import Base
from .models import AssetCategory, AssetModel, AssetStatus, AssetStatusHistory, UserModel
from .session import dispose_engine, get_session, get_session_factory

__all__ = [
    "AssetCategory",
    "AssetModel",
    "AssetStatus",
    "AssetStatusHistory",
    "Base",
    "UserModel",
    "dispose_engine",
    "get_session",
    "get_session_factory",
]
