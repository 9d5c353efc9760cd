"""Base repository: session holder, add-and-refresh, and unit-of-work control."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository over one model with a single-column primary key."""

    def __init__(self, db: AsyncSession, model: type[ModelType], pk_column: str) -> None:
        self.db = db
        self.model = model
        self.pk_column = pk_column

    async def _get(self, entity_id: str) -> ModelType | None:
        """Return a single ORM row by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).where(getattr(model, self.pk_column) == entity_id)
        )
        return result.scalar_one_or_none()

    async def _add(self, obj: ModelType) -> ModelType:
        """Persist a new row; flush and refresh so server defaults are loaded."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
