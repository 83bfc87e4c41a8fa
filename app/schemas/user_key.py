"""
User key schemas.

This module contains Pydantic schemas for user key administration.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field

from app.schemas.base import BaseSchema, IDSchema, TimestampSchema


class UserKeyCreate(BaseSchema):
    """Schema for issuing a new user key."""
    name: Optional[str] = Field(default=None, description="Owner name, e.g. 'Alice'")
    key: Optional[str] = Field(
        default=None,
        description="Admin-supplied key (custom policy); omitted when the server generates keys",
    )


class UserKeyUpdate(BaseSchema):
    """Partial update of a user key."""
    name: Optional[str] = None
    plain_key: Optional[str] = Field(default=None, description="Replacement key (custom policy only)")
    is_active: Optional[bool] = None


class UserUsageView(BaseSchema):
    model_name: str
    count: int


class UserKeySummary(IDSchema):
    name: str
    plain_key: Optional[str] = None
    usage_count: int
    last_used_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime


class UserKeyAdminView(IDSchema, TimestampSchema):
    """User key as listed in the admin console (never the hashes' inputs unless recoverable)."""
    key_id: str
    name: str
    plain_key: Optional[str] = None
    usage_count: int
    last_used_at: Optional[datetime] = None
    is_active: bool
    usages: List[UserUsageView] = []


class UserListResponse(BaseSchema):
    users: List[UserKeyAdminView]


class UserKeyCreateResponse(BaseSchema):
    """Created user plus its key (a generated key is shown only this once)."""
    user: UserKeySummary
    key: str


class UserKeyPatched(IDSchema):
    name: str
    plain_key: Optional[str] = None
    is_active: bool


class UserKeyUpdateResponse(BaseSchema):
    user: UserKeyPatched
