"""Domain layer: caller identity, transition policy and services."""

from src.domain.models import User

__all__ = ["User"]
