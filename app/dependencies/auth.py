"""
Authentication dependencies.

This module contains dependency injection functions for authentication,
authorization and the upstream HTTP client.
"""

from functools import lru_cache
from typing import AsyncIterator

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.session import SessionClaims, SessionCodec
from app.database import get_db
from app.models.user_key import UserKey
from app.services.auth import AuthService
from app.services.gemini import GeminiImageClient


@lru_cache
def get_session_codec() -> SessionCodec:
    """
    Process-wide session codec.

    Built once from settings. Raises ConfigurationError when JWT_SECRET is
    not configured.
    """
    return SessionCodec(settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    codec: SessionCodec = Depends(get_session_codec),
) -> AuthService:
    return AuthService(db, codec)


async def get_current_user(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
) -> UserKey:
    """
    Get the authenticated, still active user of the request.

    Raises:
        AuthError: Missing/invalid/foreign token, deleted or disabled user
    """
    return await auth.require_user(request)


async def get_current_admin(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
) -> SessionClaims:
    """
    Require an admin session.

    Raises:
        AuthError: Missing/invalid token or a user token
    """
    return await auth.require_admin(request)


async def get_image_client() -> AsyncIterator[GeminiImageClient]:
    """
    Upstream client for one request.

    The httpx client is closed when the request finishes (or is cancelled).
    """
    timeout = httpx.Timeout(
        settings.UPSTREAM_TIMEOUT_SECONDS,
        connect=settings.UPSTREAM_CONNECT_TIMEOUT_SECONDS,
    )
    async with httpx.AsyncClient(timeout=timeout) as http_client:
        yield GeminiImageClient(http_client)
