"""
Authentication service.

Identity-bound operations for both audiences:

* the admin account, bootstrapped by the very first admin login,
* end users, who log in with an access key issued by the admin.

Session tokens are stateless, so ``require_user`` re-reads the user on every
call; deactivating or deleting a key takes effect on the next request even
though already-issued tokens still verify.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, settings as default_settings
from app.core.exceptions import (
    AuthError,
    DuplicateError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidKeyError,
    NotFoundError,
    UserDisabledError,
    UserNotFoundError,
    ValidationError,
)
from app.core.security import generate_user_key_secret, hash_for_lookup, hash_secret, verify_secret
from app.core.session import ADMIN_AUDIENCE, USER_AUDIENCE, SessionClaims, SessionCodec, extract_token
from app.crud.admin_config import admin_config as admin_config_crud
from app.crud.user_key import user_key as user_key_crud
from app.models.user_key import UserKey
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

ADMIN_SUBJECT = "admin"
USER_KEY_POLICY_CUSTOM = "custom"
USER_KEY_POLICY_GENERATED = "generated"


@dataclass
class AdminLoginResult:
    token: str
    bootstrapped: bool


@dataclass
class UserLoginResult:
    token: str
    user: UserKey


@dataclass
class CreatedUserKey:
    user: UserKey
    # Generated secret (shown once) or the admin-supplied key.
    plain_key: str


class AuthService:
    """
    Authentication and credential management on top of the CRUD layer.

    Args:
        db: Database session of the current request
        codec: Session codec holding the signing secret
        config: Settings (TTLs, cookie names, key policy)
    """

    def __init__(self, db: AsyncSession, codec: SessionCodec, config: Settings = default_settings):
        self.db = db
        self.codec = codec
        self.config = config

    # Admin

    def _issue_admin_token(self) -> str:
        return self.codec.sign(
            SessionClaims(typ=ADMIN_AUDIENCE, sub=ADMIN_SUBJECT),
            self.config.ADMIN_TOKEN_TTL_SECONDS,
        )

    async def bootstrap_or_login_admin(self, password: str) -> AdminLoginResult:
        """
        Log the admin in, creating the admin account on first use.

        The first call ever, with any password, makes that password the admin
        password. Concurrent first calls race on a unique insert; the losers
        fall through to a normal password comparison.

        Raises:
            InvalidCredentialsError: Admin exists and the password is wrong
        """
        existing = await admin_config_crud.get_canonical(self.db)
        if existing is None:
            try:
                await admin_config_crud.create(self.db, password_hash=hash_secret(password))
            except IntegrityError:
                await self.db.rollback()
                logger.info("Admin bootstrap lost a race, comparing against the stored password")
                existing = await admin_config_crud.get_canonical(self.db)
            else:
                logger.warning("Admin account bootstrapped by first login")
                return AdminLoginResult(token=self._issue_admin_token(), bootstrapped=True)

        if existing is None or not verify_secret(password, existing.password_hash):
            logger.info("Rejected admin login: wrong password")
            raise InvalidCredentialsError("Invalid password")

        return AdminLoginResult(token=self._issue_admin_token(), bootstrapped=False)

    async def update_admin_password(self, current_password: str, new_password: str) -> None:
        """
        Replace the admin password.

        Already-issued admin tokens are not revoked and stay valid until they
        expire.

        Raises:
            NotFoundError: The admin was never bootstrapped
            InvalidCredentialsError: ``current_password`` is wrong
        """
        existing = await admin_config_crud.get_canonical(self.db)
        if existing is None:
            raise NotFoundError("Admin account does not exist")
        if not verify_secret(current_password, existing.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")

        await admin_config_crud.set_password_hash(self.db, admin=existing, password_hash=hash_secret(new_password))
        logger.info("Admin password changed")

    # Users

    async def login_user_with_key(self, plain_key: str) -> UserLoginResult:
        """
        Log a user in with their access key.

        Unknown keys and wrong keys raise the same error so callers cannot
        probe which keys exist.

        Raises:
            InvalidKeyError: Unknown key or verification mismatch
            UserDisabledError: Key is known but deactivated
        """
        user = await user_key_crud.get_by_key_id(self.db, key_id=hash_for_lookup(plain_key))
        if user is None:
            logger.info("Rejected user login: invalid key")
            raise InvalidKeyError()
        if not user.is_active:
            logger.info(f"Rejected user login: user {user.id} is disabled")
            raise UserDisabledError()
        if not verify_secret(plain_key, user.key):
            logger.info("Rejected user login: invalid key")
            raise InvalidKeyError()

        token = self.codec.sign(
            SessionClaims(typ=USER_AUDIENCE, sub=str(user.id)),
            self.config.USER_TOKEN_TTL_SECONDS,
        )
        return UserLoginResult(token=token, user=user)

    async def _ensure_key_available(self, key_id: str, exclude_user_id: Optional[int] = None) -> None:
        existing = await user_key_crud.get_by_key_id(self.db, key_id=key_id)
        if existing is not None and existing.id != exclude_user_id:
            raise DuplicateError("Key already exists")

    async def create_user_key(self, name: str, key: Optional[str] = None) -> CreatedUserKey:
        """
        Issue a new user key.

        Under the ``generated`` policy the server creates the secret and it is
        never stored in recoverable form. Under the ``custom`` policy the admin
        supplies the key and it is kept for re-display.

        Raises:
            ValidationError: Key missing (custom) or supplied (generated)
            DuplicateError: The key is already in use
        """
        if self.config.USER_KEY_POLICY == USER_KEY_POLICY_GENERATED:
            if key:
                raise ValidationError("Keys are generated by the server")
            plain_key = generate_user_key_secret()
            stored_plain_key = None
        else:
            if not key:
                raise ValidationError("Missing key")
            plain_key = key
            stored_plain_key = key

        key_id = hash_for_lookup(plain_key)
        await self._ensure_key_available(key_id)

        try:
            user = await user_key_crud.create(
                self.db,
                name=name,
                key_id=key_id,
                key_hash=hash_secret(plain_key),
                plain_key=stored_plain_key,
            )
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateError("Key already exists") from exc

        logger.info(f"Issued user key id={user.id} name={user.name}")
        return CreatedUserKey(user=user, plain_key=plain_key)

    async def update_user_key(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        plain_key: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> UserKey:
        """
        Partially update a user key.

        A new ``plain_key`` replaces lookup hash, verification hash and the
        stored plaintext together.

        Raises:
            ValidationError: Nothing to update, or key rotation under the generated policy
            NotFoundError: Unknown user
            DuplicateError: The new key belongs to another user
        """
        changes = {}
        if name is not None:
            changes["name"] = name
        if plain_key is not None:
            if self.config.USER_KEY_POLICY == USER_KEY_POLICY_GENERATED:
                raise ValidationError("Keys are generated by the server")
            if not plain_key:
                raise ValidationError("Key must not be empty")
            changes["key_id"] = hash_for_lookup(plain_key)
            changes["key"] = hash_secret(plain_key)
            changes["plain_key"] = plain_key
        if is_active is not None:
            changes["is_active"] = is_active

        if not changes:
            raise ValidationError("No fields to update")

        user = await user_key_crud.get(self.db, id=user_id)
        if user is None:
            raise NotFoundError("User not found")

        if "key_id" in changes:
            await self._ensure_key_available(changes["key_id"], exclude_user_id=user.id)

        try:
            user = await user_key_crud.update(self.db, db_obj=user, obj_in=changes)
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateError("Key already exists") from exc

        logger.info(f"Updated user key id={user.id} fields={sorted(k for k in changes if k != 'key')}")
        return user

    async def delete_user_key(self, user_id: int) -> None:
        """Hard delete a user key and its usage rows."""
        removed = await user_key_crud.remove(self.db, id=user_id)
        if removed is None:
            raise NotFoundError("User not found")
        logger.info(f"Deleted user key id={user_id}")

    # Sessions

    def require_session(self, token: Optional[str], expected_audience: str) -> SessionClaims:
        """
        Verify a session token for an expected audience.

        Raises:
            AuthError: No token (401)
            InvalidTokenError: Bad signature, expired or malformed (401)
            ForbiddenError: Valid token of the other audience (403)
        """
        if not token:
            raise AuthError("Missing session token")
        claims = self.codec.verify(token)
        if claims.typ != expected_audience:
            raise ForbiddenError()
        return claims

    async def require_user(self, request) -> UserKey:
        """
        Resolve the calling user and re-check that the key still exists and is active.

        Raises:
            UserNotFoundError: The key was deleted after the token was issued
            UserDisabledError: The key was deactivated after the token was issued
        """
        claims = self.require_session(extract_token(request, self.config.USER_SESSION_COOKIE), USER_AUDIENCE)
        try:
            user_id = int(claims.sub)
        except ValueError:
            raise UserNotFoundError()

        user = await user_key_crud.get(self.db, id=user_id)
        if user is None:
            raise UserNotFoundError()
        if not user.is_active:
            raise UserDisabledError()
        return user

    async def require_admin(self, request) -> SessionClaims:
        return self.require_session(extract_token(request, self.config.ADMIN_SESSION_COOKIE), ADMIN_AUDIENCE)
