"""
Password hashing and JWT session tokens.
"""

import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from core.config import (
    JWT_ALGORITHM,
    JWT_AUDIENCE,
    JWT_ISSUER,
    JWT_SECRET_KEY,
    TOKEN_EXPIRATION_HOURS,
)

ROLE_ADMIN = "Admin"
ROLE_USER = "User"


class TokenConfigurationError(RuntimeError):
    """Raised when the JWT secret key is missing."""


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def _require_secret(secret_key: str) -> str:
    if not secret_key:
        raise TokenConfigurationError("JWT Secret Key is not configured.")
    return secret_key


def create_access_token(
    user_id: int,
    email: str,
    is_admin: bool,
    *,
    secret_key: str = JWT_SECRET_KEY,
    issuer: str = JWT_ISSUER,
    audience: str = JWT_AUDIENCE,
    expires_in: timedelta = timedelta(hours=TOKEN_EXPIRATION_HOURS),
) -> str:
    """Issue a signed session token for a user."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": ROLE_ADMIN if is_admin else ROLE_USER,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + expires_in,
    }
    # Empty issuer/audience means the claim is not used
    if issuer:
        payload["iss"] = issuer
    if audience:
        payload["aud"] = audience
    return jwt.encode(payload, _require_secret(secret_key), algorithm=JWT_ALGORITHM)


def decode_access_token(
    token: str,
    *,
    secret_key: str = JWT_SECRET_KEY,
    issuer: str = JWT_ISSUER,
    audience: str = JWT_AUDIENCE,
) -> dict:
    """
    Validate a session token and return its claims.

    Raises:
        jwt.InvalidTokenError: bad signature, expired, wrong issuer/audience
    """
    return jwt.decode(
        token,
        _require_secret(secret_key),
        algorithms=[JWT_ALGORITHM],
        issuer=issuer or None,
        audience=audience or None,
        options={"require": ["exp", "sub"]},
    )
