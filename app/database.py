"""
Database engine and session management.

One async engine per process. Request handlers get their session through the
``get_db`` dependency; scripts open ``async_session()`` themselves.
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from app.config import settings


def resolve_async_url(url: str) -> str:
    """Make sure plain PostgreSQL URLs use the asyncpg driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


database_url = resolve_async_url(settings.SQLALCHEMY_DATABASE_URI)

# SQLite gets a fresh connection per session so connections never outlive
# the event loop that opened them (the test client runs its own loop).
engine = create_async_engine(
    database_url,
    echo=settings.DEBUG,
    poolclass=NullPool if database_url.startswith("sqlite") else None,
)

async_session = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncSession:
    """
    Request-scoped database session.

    Commits when the handler returns normally, rolls back when it raises.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables():
    """
    Create all tables from the model metadata.

    Only used when ``DEBUG`` is on; deployments run ``alembic upgrade head``.
    """
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
