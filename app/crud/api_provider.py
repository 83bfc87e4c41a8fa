"""
API provider CRUD operations.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.crud.base import CRUDBase
from app.models.api_provider import ApiProvider


class CRUDApiProvider(CRUDBase[ApiProvider]):
    """
    CRUD operations for ApiProvider model.
    """

    async def create(
        self,
        db: AsyncSession,
        *,
        name: str,
        display_name: str,
        model_id: str,
        base_url: str,
        api_key: str,
        is_active: bool = True
    ) -> ApiProvider:
        db_obj = ApiProvider(
            name=name,
            display_name=display_name,
            model_id=model_id,
            base_url=base_url,
            api_key=api_key,
            is_active=is_active,
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_active(self, db: AsyncSession) -> List[ApiProvider]:
        """
        Active providers, oldest first.

        Args:
            db: Database session

        Returns:
            List of active ApiProvider instances
        """
        result = await db.execute(
            select(ApiProvider)
            .where(ApiProvider.is_active.is_(True))
            .order_by(ApiProvider.created_at.asc(), ApiProvider.id.asc())
        )
        return list(result.scalars().all())

    async def get_active_by_name(
        self,
        db: AsyncSession,
        *,
        name: str
    ) -> Optional[ApiProvider]:
        """
        Resolve a routing key to a provider.

        Several providers may share a name; the most recently created active
        one is selected.

        Args:
            db: Database session
            name: Routing key (``modelKey``)

        Returns:
            ApiProvider instance or None if no active provider has that name
        """
        result = await db.execute(
            select(ApiProvider)
            .where(ApiProvider.is_active.is_(True), ApiProvider.name == name)
            .order_by(ApiProvider.created_at.desc(), ApiProvider.id.desc())
            .limit(1)
        )
        return result.scalars().first()


api_provider = CRUDApiProvider(ApiProvider)
