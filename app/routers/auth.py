"""
Authentication router.

This module contains the end-user login endpoint and the session cookie helper
shared with the admin login.
"""

from fastapi import APIRouter, Depends, Request, Response

from app.config import settings
from app.core.exceptions import ValidationError
from app.dependencies.auth import get_auth_service
from app.schemas.auth import SessionUser, UserLoginRequest, UserLoginResponse
from app.services.auth import AuthService
from app.utils.rate_limit import limiter

router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
    responses={401: {"description": "Unauthorized"}},
)


def set_session_cookie(response: Response, name: str, token: str, max_age: int) -> None:
    """Attach a session cookie and mark the response as non-cacheable."""
    response.set_cookie(
        key=name,
        value=token,
        max_age=max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    response.headers["Cache-Control"] = "no-store"


@router.post("/login", response_model=UserLoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: UserLoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Log an end user in with their access key.

    Returns a session token and sets the user session cookie.

    Raises:
        ValidationError: 400 if the key is missing
        InvalidKeyError: 401 if the key is unknown or wrong
        UserDisabledError: 403 if the key is deactivated
    """
    key = (body.key or "").strip()
    if not key:
        raise ValidationError("Missing key")

    result = await auth.login_user_with_key(key)

    set_session_cookie(response, settings.USER_SESSION_COOKIE, result.token, settings.USER_TOKEN_TTL_SECONDS)
    return UserLoginResponse(token=result.token, user=SessionUser.model_validate(result.user))
