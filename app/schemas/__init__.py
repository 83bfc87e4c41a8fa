# Pydantic schemas package

from app.schemas.base import BaseSchema, TimestampSchema, IDSchema, OkResponse, SuccessResponse
from app.schemas.auth import (
    UserLoginRequest, UserLoginResponse, SessionUser,
    AdminLoginRequest, AdminLoginResponse, AdminPasswordUpdate,
)
from app.schemas.provider import (
    ProviderSave, ProviderAdminView, ProviderListResponse,
    ProviderSaved, ProviderSaveResponse,
    ModelOption, ModelsResponse,
)
from app.schemas.user_key import (
    UserKeyCreate, UserKeyUpdate, UserUsageView,
    UserKeySummary, UserKeyAdminView, UserListResponse,
    UserKeyCreateResponse, UserKeyPatched, UserKeyUpdateResponse,
)
from app.schemas.generation import (
    InlineImageSchema, GenerateRequest, UsageSummary, GenerateResponse,
)

__all__ = [
    # Base schemas
    "BaseSchema", "TimestampSchema", "IDSchema", "OkResponse", "SuccessResponse",

    # Auth schemas
    "UserLoginRequest", "UserLoginResponse", "SessionUser",
    "AdminLoginRequest", "AdminLoginResponse", "AdminPasswordUpdate",

    # Provider schemas
    "ProviderSave", "ProviderAdminView", "ProviderListResponse",
    "ProviderSaved", "ProviderSaveResponse",
    "ModelOption", "ModelsResponse",

    # User key schemas
    "UserKeyCreate", "UserKeyUpdate", "UserUsageView",
    "UserKeySummary", "UserKeyAdminView", "UserListResponse",
    "UserKeyCreateResponse", "UserKeyPatched", "UserKeyUpdateResponse",

    # Generation schemas
    "InlineImageSchema", "GenerateRequest", "UsageSummary", "GenerateResponse",
]
