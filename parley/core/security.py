"""Password hashing and access-token helpers.

Passwords are stored as salted PBKDF2-HMAC-SHA256 digests in the form
``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>``. Access tokens are
HMAC-signed JWTs carrying the user id (``sub``), username (``name``) and email.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt

from parley.core.errors import AuthenticationError
from parley.server.core.config import JWTConfig, get_settings

PASSWORD_SCHEME = "pbkdf2_sha256"
PASSWORD_ITERATIONS = 390_000
SALT_BYTES = 16


@dataclass(frozen=True)
class TokenClaims:
    """Validated claims extracted from an access token."""

    user_id: str
    username: str
    email: Optional[str]
    expires_at: datetime


def _pbkdf2(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh random salt."""
    salt = secrets.token_bytes(SALT_BYTES)
    digest = _pbkdf2(password, salt, PASSWORD_ITERATIONS)
    return f"{PASSWORD_SCHEME}${PASSWORD_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    """Check a plaintext password against a stored hash.

    Malformed stored values never verify.
    """
    try:
        scheme, iterations, salt_hex, digest_hex = stored.split("$")
        if scheme != PASSWORD_SCHEME:
            return False
        expected = bytes.fromhex(digest_hex)
        actual = _pbkdf2(password, bytes.fromhex(salt_hex), int(iterations))
    except (ValueError, AttributeError):
        return False
    return hmac.compare_digest(expected, actual)


def _jwt_config(config: Optional[JWTConfig]) -> JWTConfig:
    return config if config is not None else get_settings().jwt


def create_access_token(
    user_id: str,
    username: str,
    email: Optional[str] = None,
    *,
    config: Optional[JWTConfig] = None,
    now: Optional[datetime] = None,
) -> str:
    """Issue a signed access token for a user.

    Args:
        user_id: Subject of the token.
        username: Display name claim.
        email: Optional email claim.
        config: Signing configuration; defaults to the application settings.
        now: Issue time override, used by tests.

    Returns:
        Encoded JWT string.
    """
    cfg = _jwt_config(config)
    issued_at = now or datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": user_id,
        "name": username,
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(days=cfg.expire_days)).timestamp()),
    }
    if email is not None:
        claims["email"] = email
    return jwt.encode(claims, cfg.secret_key, algorithm=cfg.algorithm)


def decode_access_token(token: str, *, config: Optional[JWTConfig] = None) -> TokenClaims:
    """Validate an access token and return its claims.

    Raises:
        AuthenticationError: If the token is missing, malformed, expired, signed
            with another key, or issued for another issuer/audience.
    """
    if not token:
        raise AuthenticationError("Missing access token")

    cfg = _jwt_config(config)
    try:
        claims = jwt.decode(
            token,
            cfg.secret_key,
            algorithms=[cfg.algorithm],
            audience=cfg.audience,
            issuer=cfg.issuer,
        )
    except JWTError as e:
        raise AuthenticationError(f"Invalid access token: {e}") from e

    sub = str(claims.get("sub") or "")
    if not sub:
        raise AuthenticationError("Invalid access token: missing sub")

    email = claims.get("email")
    return TokenClaims(
        user_id=sub,
        username=str(claims.get("name") or ""),
        email=str(email) if email is not None else None,
        expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
    )
