"""Repository protocols - abstract interfaces for data access."""

from typing import Protocol
from uuid import UUID

from boilerplate_api.domain.entities import User, UserPage


class UserRepository(Protocol):
    """Abstract interface for user data access."""

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        ...

    async def get_by_clerk_id(self, clerk_id: str) -> User | None:
        """Get user by Clerk user ID."""
        ...

    async def list(
        self,
        page: int = 1,
        page_size: int = 10,
        search: str | None = None,
    ) -> UserPage:
        """List users, newest first, optionally filtered by name or email."""
        ...

    async def create(self, user: User) -> User:
        """Create a new user."""
        ...

    async def update_fields(
        self,
        user_id: UUID,
        name: str | None = None,
        email: str | None = None,
    ) -> User | None:
        """Apply a partial update; None when the user does not exist."""
        ...

    async def update_by_clerk_id(self, clerk_id: str, name: str, email: str) -> User | None:
        """Overwrite profile fields of the user linked to a Clerk account."""
        ...

    async def delete(self, user_id: UUID) -> bool:
        """Delete a user; False when nothing was removed."""
        ...

    async def delete_by_clerk_id(self, clerk_id: str) -> bool:
        """Delete the user linked to a Clerk account."""
        ...
