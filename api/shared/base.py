"""Base repository with the CRUD operations every feature repository shares."""
from abc import ABC
from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from api.shared.entities.base import BaseEntity

T = TypeVar("T", bound=BaseEntity)


class BaseRepository(ABC, Generic[T]):
    """Base repository with common CRUD operations."""

    model: Type[T]

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    async def create(self, entity: T) -> T:
        """Create new entity."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: str) -> Optional[T]:
        """Get entity by ID."""
        stmt = (
            select(self.model)
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many_by_ids(self, entity_ids: Sequence[str]) -> List[T]:
        """Get all entities whose ID is in ``entity_ids`` (missing IDs are skipped)."""
        if not entity_ids:
            return []
        stmt = select(self.model).where(self.model.id.in_(list(entity_ids)))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_by_id(self, entity_id: str, **kwargs: Any) -> Optional[T]:
        """Update entity by ID with field values."""
        stmt = (
            update(self.model)
            .where(self.model.id == entity_id)
            .values(**kwargs)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        if result.rowcount == 0:
            return None
        return await self.get_by_id(entity_id)
