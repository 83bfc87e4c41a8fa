"""
API provider schemas.

This module contains Pydantic schemas for provider administration and the
user-facing model list.
"""

from typing import List, Optional
from pydantic import Field

from app.schemas.base import BaseSchema, IDSchema, TimestampSchema


class ProviderSave(BaseSchema):
    """Create (no id) or update (with id) a provider."""
    id: Optional[int] = None
    name: Optional[str] = Field(default=None, description="Routing key users select the provider by")
    display_name: Optional[str] = None
    model_id: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = Field(default=None, description="Required on create, optional on update")
    is_active: Optional[bool] = None


class ProviderAdminView(IDSchema, TimestampSchema):
    """Full provider record, including the raw API key, for the admin editor."""
    name: str
    display_name: str
    model_id: str
    base_url: str
    api_key: str
    is_active: bool


class ProviderListResponse(BaseSchema):
    providers: List[ProviderAdminView]


class ProviderSaved(IDSchema, TimestampSchema):
    """Provider echo after a save; the key is masked."""
    name: str
    display_name: str
    model_id: str
    base_url: str
    is_active: bool
    api_key_masked: str
    has_api_key: bool


class ProviderSaveResponse(BaseSchema):
    provider: ProviderSaved


class ModelOption(BaseSchema):
    """One selectable model for end users."""
    model_key: str
    display_name: str


class ModelsResponse(BaseSchema):
    models: List[ModelOption]
