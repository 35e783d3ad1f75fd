"""Base repository pattern for database operations."""

from __future__ import annotations

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing the table-scoped operations shared by all tables."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize the repository.

        Args:
            model: The SQLModel class for this repository
            session: The async database session
        """
        self.model = model
        self.session = session

    async def get(self, id: Any) -> Optional[ModelType]:
        """Get a record by primary key.

        Args:
            id: The record ID

        Returns:
            The record if found, None otherwise
        """
        return await self.session.get(self.model, id)

    async def create(self, obj_in: ModelType) -> ModelType:
        """Insert a new record.

        Args:
            obj_in: The object to create

        Returns:
            The created object, refreshed from the database
        """
        self.session.add(obj_in)
        await self.session.commit()
        await self.session.refresh(obj_in)
        return obj_in

    async def update(self, *, db_obj: ModelType, obj_in: dict[str, Any]) -> ModelType:
        """Update an existing record.

        Args:
            db_obj: The existing database object
            obj_in: Dictionary of fields to update

        Returns:
            The updated object
        """
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    async def delete(self, db_obj: ModelType) -> None:
        """Delete a loaded record."""
        await self.session.delete(db_obj)
        await self.session.commit()
