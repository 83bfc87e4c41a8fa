"""
User key administration router.

This module contains admin endpoints for issuing, listing, editing and
deleting end-user access keys. All endpoints require an admin session.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.crud.user_key import user_key as user_key_crud
from app.database import get_db
from app.dependencies.auth import get_auth_service, get_current_admin
from app.schemas.base import OkResponse
from app.schemas.user_key import (
    UserKeyAdminView,
    UserKeyCreate,
    UserKeyCreateResponse,
    UserKeyPatched,
    UserKeySummary,
    UserKeyUpdate,
    UserKeyUpdateResponse,
    UserListResponse,
)
from app.services.auth import AuthService

router = APIRouter(
    prefix="/admin/users",
    tags=["admin"],
    dependencies=[Depends(get_current_admin)],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden - admin session required"},
    },
)


@router.get("", response_model=UserListResponse)
async def list_users(db: AsyncSession = Depends(get_db)):
    """
    List all user keys, newest first, with per-model usage counters.
    """
    users = await user_key_crud.list_with_usages(db)
    return UserListResponse(users=[UserKeyAdminView.model_validate(u) for u in users])


@router.post("", response_model=UserKeyCreateResponse)
async def create_user(
    body: UserKeyCreate,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Issue a new user key.

    The response carries the key in plaintext. For server-generated keys this
    is the only time it is ever shown.

    Raises:
        ValidationError: 400 for a missing name or key, or a key already in use
    """
    name = (body.name or "").strip()
    if not name:
        raise ValidationError("Missing name")
    key = body.key.strip() if body.key is not None else None

    created = await auth.create_user_key(name, key or None)

    response.headers["Cache-Control"] = "no-store"
    return UserKeyCreateResponse(
        user=UserKeySummary.model_validate(created.user),
        key=created.plain_key,
    )


@router.patch("/{user_id}", response_model=UserKeyUpdateResponse)
async def update_user(
    user_id: int,
    body: UserKeyUpdate,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Partially update a user key: rename, rotate the key or toggle ``isActive``.

    Deactivation takes effect on the user's next request.
    """
    user = await auth.update_user_key(
        user_id,
        name=body.name.strip() if body.name is not None else None,
        plain_key=body.plain_key.strip() if body.plain_key is not None else None,
        is_active=body.is_active,
    )
    return UserKeyUpdateResponse(user=UserKeyPatched.model_validate(user))


@router.delete("/{user_id}", response_model=OkResponse)
async def delete_user(
    user_id: int,
    auth: AuthService = Depends(get_auth_service),
):
    """Hard delete a user key together with its usage counters."""
    await auth.delete_user_key(user_id)
    return OkResponse()
