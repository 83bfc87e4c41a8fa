"""
Authentication schemas.

This module contains Pydantic schemas for login and password requests and responses.
Request fields are optional so that missing values are reported with a
specific message by the router instead of a generic validation error.
"""

from datetime import datetime
from typing import Optional

from app.schemas.base import BaseSchema, IDSchema


class UserLoginRequest(BaseSchema):
    """Schema for end-user login with an access key."""
    key: Optional[str] = None


class SessionUser(IDSchema):
    """Public view of the logged-in user."""
    name: str
    usage_count: int
    last_used_at: Optional[datetime] = None
    is_active: bool


class UserLoginResponse(BaseSchema):
    token: str
    user: SessionUser


class AdminLoginRequest(BaseSchema):
    """Schema for admin login (or first-time bootstrap)."""
    password: Optional[str] = None


class AdminLoginResponse(BaseSchema):
    token: str
    bootstrapped: bool


class AdminPasswordUpdate(BaseSchema):
    """Schema for changing the admin password."""
    current_password: Optional[str] = None
    new_password: Optional[str] = None
