"""Password hashing and JWT creation/verification for authentication."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt
from pydantic import ValidationError

from cinereserva.core.config import Settings, settings
from cinereserva.schemas.auth import TokenClaims

logger = logging.getLogger(__name__)

# Used only when APP_ENV=dev and JWT_SECRET is unset; prod refuses to start without a secret.
DEV_JWT_SECRET = "cinereserva-dev-secret-not-for-production"

# bcrypt only looks at the first 72 bytes of the password.
BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Bearer token could not be accepted. Callers must not reveal which subclass fired."""


class InvalidTokenSignatureError(TokenError):
    """Signature mismatch or a signing algorithm outside the configured HMAC one."""


class ExpiredTokenError(TokenError):
    """Token is past its expiry time."""


class MalformedTokenError(TokenError):
    """Token cannot be decoded or its claims are missing or ill-typed."""


def _as_utc(now: datetime | None) -> datetime:
    """Current time when *now* is None; naive datetimes are taken as UTC."""
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


@lru_cache(maxsize=1)
def _warn_dev_secret() -> None:
    logger.warning(
        "JWT_SECRET is not set; signing tokens with the built-in development secret"
    )


def get_jwt_secret(cfg: Settings | None = None) -> str:
    """Return the signing secret, falling back to the dev secret outside prod."""
    cfg = cfg or settings
    if cfg.JWT_SECRET is not None:
        return cfg.JWT_SECRET.get_secret_value()
    if cfg.APP_ENV != "dev":
        raise RuntimeError("JWT_SECRET must be set outside the dev environment")
    _warn_dev_secret()
    return DEV_JWT_SECRET


def create_access_token(
    user_id: int,
    username: str,
    roles: Iterable[str],
    now: datetime | None = None,
) -> str:
    """Create a signed JWT carrying user id, username, role names, iat, exp and iss."""
    now = _as_utc(now)
    issued_at = int(now.timestamp())
    expires_at = issued_at + int(timedelta(hours=settings.JWT_EXPIRE_HOURS).total_seconds())
    payload: dict[str, Any] = {
        "user_id": user_id,
        "username": username,
        "roles": list(roles),
        "iat": issued_at,
        "exp": expires_at,
        "iss": settings.JWT_ISSUER,
    }
    return jwt.encode(payload, get_jwt_secret(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, now: datetime | None = None) -> TokenClaims:
    """
    Verify signature, algorithm, issuer and expiry; return the claims.

    Expiry is checked against *now* (defaults to the current time); a token
    is still valid at exactly its expiry second.
    Raises a TokenError subclass on any failure.
    """
    now = _as_utc(now)
    try:
        payload = jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            options={
                "require": ["exp", "iat", "iss"],
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
            },
        )
    except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
        raise InvalidTokenSignatureError("token signature rejected") from e
    except jwt.PyJWTError as e:
        raise MalformedTokenError("token could not be decoded") from e

    try:
        claims = TokenClaims(
            user_id=payload.get("user_id"),
            username=payload.get("username"),
            roles=payload.get("roles", []),
            issued_at=payload.get("iat"),
            expires_at=payload.get("exp"),
            issuer=payload.get("iss"),
        )
    except ValidationError as e:
        raise MalformedTokenError("token claims are missing or invalid") from e

    if now > claims.expires_at:
        raise ExpiredTokenError("token has expired")
    return claims
