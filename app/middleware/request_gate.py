"""
Request gate middleware.

A fast-path filter in front of the routers: it decides from the path alone
which session audience a request needs and rejects requests without a valid
token of that audience. Only an explicit list of routes is gated; every other
path passes untouched. Handlers still re-validate through their auth
dependencies.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.exceptions import InvalidTokenError
from app.core.session import ADMIN_AUDIENCE, USER_AUDIENCE, SessionCodec, extract_token
from app.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GatePolicy:
    """Audience a gated path requires and the cookie its token lives in."""

    audience: str
    cookie_name: str


class RequestGate:
    """
    Routing policy from request path to session audience.

    Args:
        api_prefix: Prefix the API routers are mounted under (e.g. ``/api``)
        user_cookie: Name of the user session cookie
        admin_cookie: Name of the admin session cookie
    """

    def __init__(self, api_prefix: str, user_cookie: str, admin_cookie: str):
        prefix = api_prefix.rstrip("/")
        self.public_paths = frozenset({f"{prefix}/auth/login", f"{prefix}/admin/login"})
        self.user_paths = frozenset({f"{prefix}/models", f"{prefix}/generate"})
        self.admin_root = f"{prefix}/admin"
        self.user_policy = GatePolicy(audience=USER_AUDIENCE, cookie_name=user_cookie)
        self.admin_policy = GatePolicy(audience=ADMIN_AUDIENCE, cookie_name=admin_cookie)

    def is_admin_path(self, path: str) -> bool:
        return path == self.admin_root or path.startswith(self.admin_root + "/")

    def policy_for(self, path: str) -> Optional[GatePolicy]:
        """
        Policy for a request path, or None when the path is not gated.
        """
        path = path.rstrip("/") or "/"
        if path in self.public_paths:
            return None
        if self.is_admin_path(path):
            return self.admin_policy
        if path in self.user_paths:
            return self.user_policy
        return None


class RequestGateMiddleware(BaseHTTPMiddleware):
    """
    Rejects gated requests lacking a valid session of the expected audience.

    * no token: 401
    * bad signature, expired or malformed token: 401
    * valid token of the other audience: 403
    """

    def __init__(self, app, gate: RequestGate, codec_factory: Callable[[], SessionCodec]):
        super().__init__(app)
        self.gate = gate
        self.codec_factory = codec_factory

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return await call_next(request)

        policy = self.gate.policy_for(request.url.path)
        if policy is None:
            return await call_next(request)

        token = extract_token(request, policy.cookie_name)
        if not token:
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        try:
            claims = self.codec_factory().verify(token)
        except InvalidTokenError:
            logger.debug(f"Gate rejected invalid token on {request.url.path}")
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        if claims.typ != policy.audience:
            return JSONResponse({"error": "Forbidden"}, status_code=403)

        return await call_next(request)
