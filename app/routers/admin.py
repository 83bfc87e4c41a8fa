"""
Admin account router.

Login (with first-login bootstrap) and password change for the single admin
account.
"""

from fastapi import APIRouter, Depends, Request, Response

from app.config import settings
from app.core.exceptions import ValidationError
from app.core.session import SessionClaims
from app.dependencies.auth import get_auth_service, get_current_admin
from app.routers.auth import set_session_cookie
from app.schemas.auth import AdminLoginRequest, AdminLoginResponse, AdminPasswordUpdate
from app.schemas.base import SuccessResponse
from app.services.auth import AuthService
from app.utils.rate_limit import limiter

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    responses={401: {"description": "Unauthorized"}},
)


@router.post("/login", response_model=AdminLoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def admin_login(
    request: Request,
    response: Response,
    body: AdminLoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Log the admin in.

    The very first login sets the admin password to whatever was supplied
    and answers with ``bootstrapped: true``.
    """
    if not body.password:
        raise ValidationError("Missing password")

    result = await auth.bootstrap_or_login_admin(body.password)

    set_session_cookie(response, settings.ADMIN_SESSION_COOKIE, result.token, settings.ADMIN_TOKEN_TTL_SECONDS)
    return AdminLoginResponse(token=result.token, bootstrapped=result.bootstrapped)


@router.put("/password", response_model=SuccessResponse)
async def change_password(
    body: AdminPasswordUpdate,
    admin: SessionClaims = Depends(get_current_admin),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Change the admin password.

    Raises:
        ValidationError: 400 if a field is missing or the new password is too short
        InvalidCredentialsError: 401 if the current password is wrong
    """
    if not body.current_password or not body.new_password:
        raise ValidationError("Missing currentPassword or newPassword")
    if len(body.new_password) < settings.ADMIN_PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"New password must be at least {settings.ADMIN_PASSWORD_MIN_LENGTH} characters"
        )

    await auth.update_admin_password(body.current_password, body.new_password)
    return SuccessResponse()
