"""
Admin configuration CRUD operations.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.crud.base import CRUDBase
from app.models.admin_config import AdminConfig, ADMIN_SINGLETON


class CRUDAdminConfig(CRUDBase[AdminConfig]):
    """
    CRUD operations for the AdminConfig singleton.
    """

    async def get_canonical(self, db: AsyncSession) -> Optional[AdminConfig]:
        """
        Get the admin record (first by ascending id).

        Returns:
            AdminConfig instance or None if the admin was never bootstrapped
        """
        result = await db.execute(select(AdminConfig).order_by(AdminConfig.id.asc()).limit(1))
        return result.scalars().first()

    async def create(self, db: AsyncSession, *, password_hash: str) -> AdminConfig:
        """
        Insert the admin record.

        Raises:
            sqlalchemy.exc.IntegrityError: If another request bootstrapped first
        """
        db_obj = AdminConfig(singleton=ADMIN_SINGLETON, password_hash=password_hash)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def set_password_hash(
        self,
        db: AsyncSession,
        *,
        admin: AdminConfig,
        password_hash: str
    ) -> AdminConfig:
        return await self.update(db, db_obj=admin, obj_in={"password_hash": password_hash})


admin_config = CRUDAdminConfig(AdminConfig)
