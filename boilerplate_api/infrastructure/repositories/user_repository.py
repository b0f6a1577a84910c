"""User repository implementation."""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from boilerplate_api.domain.entities.user import User, UserPage
from boilerplate_api.infrastructure.database.models.base import utcnow
from boilerplate_api.infrastructure.database.models.user import UserModel
from boilerplate_api.infrastructure.repositories.base import BaseRepository
from boilerplate_api.infrastructure.telemetry.metrics import track_database_query

MAX_PAGE_SIZE = 100


class UserRepositoryImpl(BaseRepository[UserModel, User]):
    """SQLAlchemy implementation of UserRepository."""

    model_class = UserModel

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_by_clerk_id(self, clerk_id: str) -> User | None:
        """Get user by Clerk user ID."""
        model = await self._get_model_by_clerk_id(clerk_id)
        if model is None:
            return None
        return model.to_entity()

    async def list(
        self,
        page: int = 1,
        page_size: int = 10,
        search: str | None = None,
    ) -> UserPage:
        """List users, newest first.

        Args:
            page: 1-based page number
            page_size: Rows per page, clamped to 1..MAX_PAGE_SIZE
            search: Case-insensitive substring matched against name or email

        Returns:
            The requested page and the total number of matching users
        """
        page = max(page, 1)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

        filters = []
        if search:
            filters.append(
                or_(
                    UserModel.name.icontains(search, autoescape=True),
                    UserModel.email.icontains(search, autoescape=True),
                )
            )

        count_stmt = select(func.count()).select_from(UserModel).where(*filters)
        with track_database_query("select", self.table):
            total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(UserModel)
            .where(*filters)
            .order_by(UserModel.created_at.desc(), UserModel.id)
            .limit(page_size)
            .offset((page - 1) * page_size)
        )
        with track_database_query("select", self.table):
            result = await self.session.execute(stmt)

        return UserPage(
            users=[model.to_entity() for model in result.scalars().all()],
            total=total,
        )

    async def update_fields(
        self,
        user_id: UUID,
        name: str | None = None,
        email: str | None = None,
    ) -> User | None:
        """Apply a partial update and refresh updated_at.

        Returns:
            The updated user, or None if no user has this ID
        """
        with track_database_query("select", self.table):
            model = await self.session.get(UserModel, user_id)
        if model is None:
            return None

        if name is not None:
            model.name = name
        if email is not None:
            model.email = email
        model.updated_at = utcnow()

        return await self._flush_update(model)

    async def update_by_clerk_id(self, clerk_id: str, name: str, email: str) -> User | None:
        """Overwrite name and email of the user linked to a Clerk account."""
        model = await self._get_model_by_clerk_id(clerk_id)
        if model is None:
            return None

        model.name = name
        model.email = email
        model.updated_at = utcnow()

        return await self._flush_update(model)

    async def delete_by_clerk_id(self, clerk_id: str) -> bool:
        """Delete the user linked to a Clerk account."""
        model = await self._get_model_by_clerk_id(clerk_id)
        if model is None:
            return False
        await self.session.delete(model)
        with track_database_query("delete", self.table):
            await self.session.flush()
        return True

    async def _get_model_by_clerk_id(self, clerk_id: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.clerk_id == clerk_id)
        with track_database_query("select", self.table):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _flush_update(self, model: UserModel) -> User:
        with track_database_query("update", self.table):
            await self.session.flush()
        await self.session.refresh(model)
        return model.to_entity()
