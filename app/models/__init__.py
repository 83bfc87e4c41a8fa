# Database models package

from app.models.base import BaseModel
from app.models.admin_config import AdminConfig
from app.models.user_key import UserKey, UserUsage
from app.models.api_provider import ApiProvider

__all__ = [
    "BaseModel",
    "AdminConfig",
    "UserKey",
    "UserUsage",
    "ApiProvider",
]

# Configure all mappers after all models are imported
# This resolves bidirectional relationships defined with string references
from sqlalchemy.orm import configure_mappers
configure_mappers()
