"""
Security utilities for user key and admin password handling.

Two different hashes are kept for every user key:

* a deterministic SHA-256 digest (``key_id``) used only as a unique index to
  find the record, and
* a salted bcrypt hash (``key``) used to prove possession of the plaintext.

Admin passwords only get the bcrypt hash.
"""

import hashlib
import secrets

from passlib.context import CryptContext

from app.config import settings

USER_KEY_PREFIX = "uk_live_"
MASK_CHAR = "*"
VISIBLE_TAIL = 4

# Create bcrypt context for key and password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_for_lookup(plaintext: str) -> str:
    """
    Deterministic lookup hash of a secret.

    Args:
        plaintext: Plain text key

    Returns:
        64-character hexadecimal SHA-256 digest
    """
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()


def mask_for_display(secret: str) -> str:
    """
    Mask all but the last four characters of a secret.

    The result has the same length as the input. Never compare against it.
    """
    if not secret:
        return ""
    tail = secret[-VISIBLE_TAIL:]
    return MASK_CHAR * max(0, len(secret) - VISIBLE_TAIL) + tail


def generate_user_key_secret() -> str:
    """
    Generate a new high-entropy user key.

    Returns:
        ``uk_live_`` followed by 32 random bytes, URL-safe base64 encoded
    """
    return f"{USER_KEY_PREFIX}{secrets.token_urlsafe(32)}"


def hash_secret(plaintext: str) -> str:
    """
    Hash a key or password using bcrypt with automatic salt generation.

    Args:
        plaintext: Plain text key or password

    Returns:
        Bcrypt hash string
    """
    return pwd_context.hash(plaintext)


def verify_secret(plaintext: str, stored_hash: str) -> bool:
    """
    Verify a plain text key or password against a stored bcrypt hash.

    Returns:
        True if it matches, False otherwise (including unreadable hashes)
    """
    try:
        return pwd_context.verify(plaintext, stored_hash)
    except (ValueError, TypeError):
        return False
