# CRUD operations package

from app.crud.base import CRUDBase
from app.crud.admin_config import CRUDAdminConfig, admin_config
from app.crud.user_key import CRUDUserKey, user_key
from app.crud.api_provider import CRUDApiProvider, api_provider
from app.crud.usage import record_generation

__all__ = [
    "CRUDBase",
    "CRUDAdminConfig", "admin_config",
    "CRUDUserKey", "user_key",
    "CRUDApiProvider", "api_provider",
    "record_generation",
]
