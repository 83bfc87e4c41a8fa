"""
Session token codec.

Sessions are stateless HS256 JWTs carrying ``typ`` (audience), ``sub``,
``iat`` and ``exp``. Nothing is stored server-side, so a token stays valid
until it expires; callers that need revocation re-check the subject.
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from jose import JWTError, jwt

from app.core.exceptions import ConfigurationError, InvalidTokenError

USER_AUDIENCE = "user"
ADMIN_AUDIENCE = "admin"
AUDIENCES = (USER_AUDIENCE, ADMIN_AUDIENCE)


@dataclass(frozen=True)
class SessionClaims:
    """Verified (or to-be-signed) session claims."""

    typ: str
    sub: str
    iat: Optional[int] = None
    exp: Optional[int] = None


class SessionCodec:
    """
    Signs and verifies session tokens with a process-wide secret.

    The secret is passed in explicitly; see ``app.dependencies.auth.get_session_codec``
    for how the application resolves it from settings.
    """

    def __init__(
        self,
        secret: Optional[str],
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ConfigurationError("Missing JWT_SECRET")
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock

    def sign(self, claims: SessionClaims, ttl_seconds: int) -> str:
        """
        Create a signed token for the given audience and subject.

        Args:
            claims: Audience and subject (iat/exp are ignored and recomputed)
            ttl_seconds: Lifetime of the token

        Returns:
            Encoded JWT
        """
        now = int(self._clock())
        payload = {
            "typ": claims.typ,
            "sub": claims.sub,
            "iat": now,
            "exp": now + ttl_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> SessionClaims:
        """
        Verify signature, expiry and claim shapes of a token.

        Raises:
            InvalidTokenError: On any failure
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise InvalidTokenError(f"Invalid session token: {exc}") from exc

        sub = payload.get("sub")
        typ = payload.get("typ")
        if not isinstance(sub, str):
            raise InvalidTokenError("Invalid session token: sub")
        if typ not in AUDIENCES:
            raise InvalidTokenError("Invalid session token: typ")

        return SessionClaims(typ=typ, sub=sub, iat=payload.get("iat"), exp=payload.get("exp"))


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token of an ``Authorization: Bearer <token>`` header, if any."""
    if not authorization:
        return None
    scheme, _, value = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return value.strip() or None


def parse_cookie_header(cookie_header: Optional[str]) -> Dict[str, str]:
    """
    Parse a raw ``Cookie`` header into a mapping of cookie names to values.

    Malformed segments (no ``=``, empty name) are skipped.
    """
    cookies: Dict[str, str] = {}
    if not cookie_header:
        return cookies
    for part in cookie_header.split(";"):
        idx = part.find("=")
        if idx <= 0:
            continue
        name = part[:idx].strip()
        if not name:
            continue
        cookies[name] = part[idx + 1:].strip()
    return cookies


def extract_cookie_token(cookie_header: Optional[str], cookie_name: str) -> Optional[str]:
    value = parse_cookie_header(cookie_header).get(cookie_name)
    if value is None:
        return None
    return value.strip() or None


def extract_token(request, cookie_name: str) -> Optional[str]:
    """
    Resolve the session token of a request.

    The bearer header takes precedence over the named cookie. Returns None
    when neither is present; callers decide whether that is an error.
    """
    return (
        extract_bearer_token(request.headers.get("authorization"))
        or extract_cookie_token(request.headers.get("cookie"), cookie_name)
    )
