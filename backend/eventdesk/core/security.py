"""
Password hashing and JWT helpers.

Access tokens are short-lived and carry the admin id, username and role.
Refresh tokens are signed with a separate secret, carry only the admin id
plus a unique jti, and are only honoured while a digest of the exact token
string is stored against the admin (see auth_service).
"""

import hashlib
import hmac
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
import jwt

from eventdesk.core.config import get_settings
from eventdesk.core.exceptions import AuthError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


def matches_master_key(candidate: str, master_key: Optional[str] = None) -> bool:
    """Constant-time comparison against the configured emergency key."""
    if master_key is None:
        master_key = get_settings().MASTER_KEY
    if not master_key or not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), master_key.encode("utf-8"))


def digest_token(token: str) -> str:
    """Storage form of a refresh token; lookups compare digests, not raw tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_access_token(admin_id: int, username: str, role: str) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(admin_id),
        "username": username,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(admin_id: int) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(admin_id),
        "type": REFRESH_TOKEN_TYPE,
        # Two logins in the same second must still yield distinct tokens
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.REFRESH_SECRET_KEY, algorithm=settings.ALGORITHM)


def _decode(token: str, secret: str, expected_type: str, message: str) -> dict[str, Any]:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError:
        raise AuthError(message)

    if payload.get("type") != expected_type:
        raise AuthError(message)
    try:
        payload["sub"] = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthError(message)
    return payload


def decode_access_token(token: str) -> dict[str, Any]:
    """Return the verified payload (with integer ``sub``) or raise AuthError."""
    return _decode(
        token,
        get_settings().SECRET_KEY,
        ACCESS_TOKEN_TYPE,
        "Not authorized, token invalid",
    )


def decode_refresh_token(token: str) -> dict[str, Any]:
    return _decode(
        token,
        get_settings().REFRESH_SECRET_KEY,
        REFRESH_TOKEN_TYPE,
        "Invalid or expired refresh token",
    )
