"""Base repository with common CRUD operations."""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from boilerplate_api.infrastructure.database.models.base import Base
from boilerplate_api.infrastructure.telemetry.metrics import track_database_query

ModelType = TypeVar("ModelType", bound=Base)
EntityType = TypeVar("EntityType")


class BaseRepository(Generic[ModelType, EntityType]):
    """Base repository providing common CRUD operations.

    Subclasses should set:
    - model_class: The SQLAlchemy model class
    - Implement to_entity and from_entity methods on the model
    """

    model_class: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def table(self) -> str:
        return self.model_class.__tablename__

    async def get_by_id(self, id: UUID) -> EntityType | None:
        """Get entity by primary key."""
        with track_database_query("select", self.table):
            result = await self.session.get(self.model_class, id)
        if result is None:
            return None
        return result.to_entity()

    async def create(self, entity: EntityType) -> EntityType:
        """Create a new entity."""
        model = self.model_class.from_entity(entity)
        self.session.add(model)
        with track_database_query("insert", self.table):
            await self.session.flush()
        await self.session.refresh(model)
        return model.to_entity()

    async def delete(self, id: UUID) -> bool:
        """Delete entity by ID."""
        with track_database_query("select", self.table):
            result = await self.session.get(self.model_class, id)
        if result is None:
            return False
        await self.session.delete(result)
        with track_database_query("delete", self.table):
            await self.session.flush()
        return True
