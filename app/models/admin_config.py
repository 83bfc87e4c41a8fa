"""
Admin configuration database model.

This module contains the AdminConfig model holding the admin password hash.
"""

from sqlalchemy import Column, Integer, String

from app.models.base import BaseModel

ADMIN_SINGLETON = 1


class AdminConfig(BaseModel):
    """
    Singleton record with the admin password hash.

    The unique ``singleton`` column only ever takes the value 1, so a second
    concurrent bootstrap insert fails instead of creating another admin.
    """

    __tablename__ = "admin_config"

    singleton = Column(Integer, unique=True, nullable=False, default=ADMIN_SINGLETON)
    password_hash = Column(String(255), nullable=False, comment="Bcrypt hash of the admin password")
