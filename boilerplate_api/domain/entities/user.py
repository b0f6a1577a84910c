"""User entity."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID


@dataclass
class User:
    """A user of the application, optionally linked to a Clerk account."""

    id: UUID
    email: str
    name: str
    clerk_id: str | None = None  # Clerk user ID, set once synced via webhook
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.email:
            raise ValueError("User email is required")
        if not self.name:
            raise ValueError("User name is required")


@dataclass
class UserPage:
    """One page of a user listing plus the size of the full result set."""

    users: list[User]
    total: int
