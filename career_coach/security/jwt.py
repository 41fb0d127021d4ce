"""Bearer token helpers for resolving the calling user.

Accounts and passwords belong to the user-management service; this backend
only signs and validates the JWTs that carry a user id in ``sub`` and,
optionally, the user's ``kind`` (candidate or recruiter).

PySecure-4-Minimal controls:
- Avoid logging secrets or tokens.
- Reject tokens without a usable subject.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt  # python-jose (fastapi-compatible)

from career_coach.core.config import get_settings


# PUBLIC_INTERFACE
def create_access_token(subject: str, kind: Optional[str] = None, expires_minutes: Optional[int] = None) -> str:
    """
    PUBLIC_INTERFACE
    Sign an access token for a user id.

    Args:
        subject: User identifier stored in ``sub``.
        kind: Optional user kind claim; informational only, the stored user decides.
        expires_minutes: TTL override; if None or not positive, use settings.
    """
    settings = get_settings()
    ttl = expires_minutes if isinstance(expires_minutes, int) and expires_minutes > 0 else settings.access_token_expire_minutes
    issued = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": subject,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(minutes=ttl)).timestamp()),
    }
    if kind:
        claims["kind"] = kind
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


# PUBLIC_INTERFACE
def decode_token(token: str) -> dict[str, Any]:
    """Validate signature and expiry; raises JWTError otherwise."""
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


# PUBLIC_INTERFACE
def subject_of(token: str) -> str:
    """Return the user id a valid token names.

    Raises:
        JWTError: If the token is invalid, expired, or has no string ``sub``.
    """
    sub = decode_token(token).get("sub")
    if not isinstance(sub, str) or not sub:
        raise JWTError("token has no subject")
    return sub
