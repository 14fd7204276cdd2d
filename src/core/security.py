"""JWT helpers used to identify the acting user."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from .config import settings


class TokenDecodeError(Exception):
    """Raised when a bearer token is missing claims, expired or tampered with."""


def create_access_token(subject: str, role: str, expires_minutes: int | None = None) -> str:
    """Sign a token for ``subject`` (a user id) carrying its role."""
    lifetime = timedelta(minutes=expires_minutes or settings.jwt_expires_in_minutes)
    issued_at = datetime.now(tz=timezone.utc)
    claims: dict[str, Any] = {
        "sub": subject,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise TokenDecodeError("Invalid token") from exc
    if not payload.get("sub"):
        raise TokenDecodeError("Token has no subject")
    return payload
