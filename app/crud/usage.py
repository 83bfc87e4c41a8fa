"""
Usage accounting.

A successful generation bumps the user's total counter and the per-model
counter. Both writes happen in one transaction.
"""

from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql import func

from app.models.user_key import UserKey, UserUsage

_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


async def _upsert_usage(db: AsyncSession, *, user_id: int, model_name: str) -> None:
    insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(UserUsage).values(user_id=user_id, model_name=model_name, count=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "model_name"],
            set_={"count": UserUsage.count + 1, "updated_at": func.now()},
        )
        await db.execute(stmt)
        return

    result = await db.execute(
        select(UserUsage).where(UserUsage.user_id == user_id, UserUsage.model_name == model_name)
    )
    usage = result.scalars().first()
    if usage is None:
        db.add(UserUsage(user_id=user_id, model_name=model_name, count=1))
    else:
        usage.count = UserUsage.count + 1
    await db.flush()


async def record_generation(db: AsyncSession, *, user: UserKey, model_name: str) -> UserKey:
    """
    Count one successful generation for ``user`` on ``model_name``.

    Increments ``usage_count``, refreshes ``last_used_at`` and upserts the
    (user, model) usage row, then commits once. On failure nothing is written.

    Args:
        db: Database session
        user: The generating user
        model_name: Provider display name the usage is recorded under

    Returns:
        The refreshed UserKey
    """
    try:
        await db.execute(
            update(UserKey)
            .where(UserKey.id == user.id)
            .values(
                usage_count=UserKey.usage_count + 1,
                last_used_at=datetime.now(timezone.utc),
            )
        )
        await _upsert_usage(db, user_id=user.id, model_name=model_name)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(user)
    return user
