"""
User key CRUD operations.

This module contains CRUD operations specific to user key management.
Hashing is done by the caller (see ``app.services.auth``); this layer only
stores and retrieves records.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.crud.base import CRUDBase
from app.models.user_key import UserKey


class CRUDUserKey(CRUDBase[UserKey]):
    """
    CRUD operations for UserKey model.
    """

    async def create(
        self,
        db: AsyncSession,
        *,
        name: str,
        key_id: str,
        key_hash: str,
        plain_key: Optional[str] = None,
        is_active: bool = True
    ) -> UserKey:
        """
        Create a new user key record.

        Args:
            db: Database session
            name: Owner name
            key_id: Lookup hash of the plaintext key
            key_hash: Verification hash of the plaintext key
            plain_key: Recoverable plaintext (admin-supplied keys only)
            is_active: Whether the key may log in

        Returns:
            Created UserKey instance

        Raises:
            sqlalchemy.exc.IntegrityError: If key_id is already taken
        """
        db_obj = UserKey(
            name=name,
            key_id=key_id,
            key=key_hash,
            plain_key=plain_key,
            usage_count=0,
            is_active=is_active,
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_by_key_id(
        self,
        db: AsyncSession,
        *,
        key_id: str
    ) -> Optional[UserKey]:
        """
        Get a user key by its lookup hash.

        Args:
            db: Database session
            key_id: SHA-256 lookup hash

        Returns:
            UserKey instance or None if not found
        """
        result = await db.execute(select(UserKey).where(UserKey.key_id == key_id))
        return result.scalars().first()

    async def list_with_usages(self, db: AsyncSession) -> List[UserKey]:
        """All user keys, newest first, with their per-model usage rows loaded."""
        return await self.get_multi(db, skip=0, limit=10000, newest_first=True)


# Create instance of CRUDUserKey
user_key = CRUDUserKey(UserKey)
