"""SQLAlchemy database models."""

from boilerplate_api.infrastructure.database.models.base import Base, TimestampMixin
from boilerplate_api.infrastructure.database.models.user import UserModel

__all__ = [
    "Base",
    "TimestampMixin",
    "UserModel",
]
