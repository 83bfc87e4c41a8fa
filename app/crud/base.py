"""
Base CRUD operations.

This module contains base CRUD (Create, Read, Update, Delete) operations
that can be inherited by specific model CRUD classes.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """
    Base CRUD operations class.

    Provides generic CRUD operations that can be used by specific model CRUD classes.
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize CRUD operations for a specific model.

        Args:
            model: The SQLAlchemy model class
        """
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Args:
            db: Database session
            id: Record ID

        Returns:
            Model instance or None if not found
        """
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalars().first()

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 100,
        newest_first: bool = True,
    ) -> List[ModelType]:
        """
        Get multiple records with pagination, ordered by creation time.

        Args:
            db: Database session
            skip: Number of records to skip
            limit: Maximum number of records to return
            newest_first: Order by created_at descending (default) or ascending

        Returns:
            List of model instances
        """
        if newest_first:
            order = (self.model.created_at.desc(), self.model.id.desc())
        else:
            order = (self.model.created_at.asc(), self.model.id.asc())
        result = await db.execute(
            select(self.model).order_by(*order).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Dict[str, Any]
    ) -> ModelType:
        """
        Update an existing record.

        Args:
            db: Database session
            db_obj: Existing model instance
            obj_in: Mapping of column names to new values

        Returns:
            Updated model instance
        """
        columns = {c.name for c in self.model.__table__.columns}
        for field, value in obj_in.items():
            if field in columns:
                setattr(db_obj, field, value)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def remove(self, db: AsyncSession, *, id: int) -> Optional[ModelType]:
        """
        Remove a record by ID.

        Args:
            db: Database session
            id: Record ID to remove

        Returns:
            Removed model instance or None if not found
        """
        result = await db.execute(select(self.model).where(self.model.id == id))
        db_obj = result.scalars().first()

        if db_obj:
            await db.delete(db_obj)
            await db.commit()

        return db_obj
