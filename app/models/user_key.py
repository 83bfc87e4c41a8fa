"""
User key database models.

This module contains the UserKey model (one issued access credential) and the
UserUsage model (per-user, per-model generation counter).
"""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class UserKey(BaseModel):
    """
    User key model for end-user authentication.

    ``key_id`` is the SHA-256 of the plaintext and is the only lookup path.
    ``key`` is a bcrypt hash used to confirm possession of the plaintext.
    """

    __tablename__ = "user_keys"

    name = Column(String(200), nullable=False, comment="Human readable owner name")
    key_id = Column(String(64), unique=True, index=True, nullable=False, comment="SHA-256 lookup hash of the key")
    key = Column(String(255), nullable=False, comment="Bcrypt hash of the key")
    plain_key = Column(String(255), nullable=True, comment="Recoverable key, only for admin-supplied keys")
    usage_count = Column(Integer, nullable=False, default=0)
    last_used_at = Column(DateTime(timezone=True), nullable=True, comment="Timestamp of last generation")
    is_active = Column(Boolean, default=True, nullable=False)

    usages = relationship(
        "UserUsage",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="UserUsage.model_name",
    )

    __table_args__ = (
        Index("idx_user_key_active", "is_active"),
    )

    def __repr__(self):
        return f"<UserKey(id={self.id}, name='{self.name}', is_active={self.is_active})>"


class UserUsage(BaseModel):
    """Generation counter per user and model display name."""

    __tablename__ = "user_usages"

    user_id = Column(Integer, ForeignKey("user_keys.id", ondelete="CASCADE"), nullable=False, index=True)
    model_name = Column(String(200), nullable=False)
    count = Column(Integer, nullable=False, default=0)

    user = relationship("UserKey", back_populates="usages")

    __table_args__ = (
        UniqueConstraint("user_id", "model_name", name="uq_user_usage_user_model"),
    )

    def __repr__(self):
        return f"<UserUsage(user_id={self.user_id}, model_name='{self.model_name}', count={self.count})>"
