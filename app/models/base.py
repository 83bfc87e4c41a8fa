"""
Declarative base classes for the gateway tables.

Every table gets an integer primary key plus server-maintained creation and
modification timestamps. Listings order by ``created_at`` with ``id`` as the
tie breaker, since SQLite timestamps only have second resolution.
"""

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from app.database import Base


class TimestampMixin:
    """``created_at`` / ``updated_at`` columns filled in by the database."""

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def updated_at(cls):
        # ON CONFLICT DO UPDATE skips onupdate; the usage upsert sets it itself
        return Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class BaseModel(TimestampMixin, Base):
    """
    Abstract base of all gateway models.
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id})>"
