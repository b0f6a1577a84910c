"""User database model."""

from uuid import UUID, uuid4

from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from boilerplate_api.domain.entities.user import User
from boilerplate_api.infrastructure.database.models.base import Base, TimestampMixin, as_utc


class UserModel(Base, TimestampMixin):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    clerk_id: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)

    __table_args__ = (
        Index("users_email_index", "email"),
        Index("users_clerk_id_index", "clerk_id"),
    )

    def to_entity(self) -> User:
        """Convert to domain entity."""
        return User(
            id=self.id,
            email=self.email,
            name=self.name,
            clerk_id=self.clerk_id,
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at),
        )

    @classmethod
    def from_entity(cls, entity: User) -> "UserModel":
        """Create from domain entity."""
        return cls(
            id=entity.id,
            email=entity.email,
            name=entity.name,
            clerk_id=entity.clerk_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
