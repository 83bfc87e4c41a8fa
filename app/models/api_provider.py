"""
API provider database model.

This module contains the ApiProvider model describing one upstream
generation backend.
"""

from sqlalchemy import Column, String, Boolean, Index

from app.models.base import BaseModel


class ApiProvider(BaseModel):
    """
    Upstream generation backend configuration.

    ``name`` is the routing key clients send as ``modelKey``. It is not unique;
    the most recently created active provider with a given name wins.
    """

    __tablename__ = "api_providers"

    name = Column(String(100), nullable=False, index=True, comment="Routing key exposed to users as modelKey")
    display_name = Column(String(200), nullable=False)
    model_id = Column(String(200), nullable=False, comment="Upstream model identifier")
    base_url = Column(String(500), nullable=False)
    api_key = Column(String(500), nullable=False, comment="Upstream API key (only ever shown masked to users)")
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_api_provider_active_name", "is_active", "name"),
    )

    def __repr__(self):
        return f"<ApiProvider(id={self.id}, name='{self.name}', model_id='{self.model_id}', is_active={self.is_active})>"
