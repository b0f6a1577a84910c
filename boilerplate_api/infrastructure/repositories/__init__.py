"""Repository implementations."""

from boilerplate_api.infrastructure.repositories.base import BaseRepository
from boilerplate_api.infrastructure.repositories.user_repository import (
    MAX_PAGE_SIZE,
    UserRepositoryImpl,
)

__all__ = [
    "BaseRepository",
    "MAX_PAGE_SIZE",
    "UserRepositoryImpl",
]
