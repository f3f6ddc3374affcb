"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
The token carries the user's id, email and role and expires after
24 hours (settings.token_expire_hours).

Verification only checks signature and expiry — the user table is not
consulted. A user deleted or demoted after login keeps a working token
until it expires; that staleness window is bounded by the token TTL.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from sketchroom.config import settings
from sketchroom.db.models import ROLE_ADMIN, ROLES
from sketchroom.errors import AuthenticationError


class TokenError(AuthenticationError):
    """Raised when token verification fails."""


class TokenExpiredError(TokenError):
    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class InvalidSignatureError(TokenError):
    def __init__(self, message: str = "Invalid token signature"):
        super().__init__(message)


class MalformedTokenError(TokenError):
    def __init__(self, message: str = "Malformed token"):
        super().__init__(message)


@dataclass(frozen=True)
class Claims:
    """Decoded identity/role payload of a session token."""

    user_id: int
    email: str
    role: str
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def issue_token(
    user_id: int,
    email: str,
    role: str,
    expires_hours: Optional[int] = None,
) -> str:
    """Create a signed session token for a user."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(hours=expires_hours or settings.token_expire_hours)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": now,
        "exp": expires,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Claims:
    """Verify and decode a session token.

    Returns Claims on success.
    Raises TokenExpiredError, InvalidSignatureError or MalformedTokenError.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidSignatureError:
        raise InvalidSignatureError()
    except jwt.InvalidTokenError as e:
        raise MalformedTokenError(f"Malformed token: {e}")

    try:
        user_id = int(payload["sub"])
        email = payload["email"]
        role = payload["role"]
    except (KeyError, TypeError, ValueError):
        raise MalformedTokenError("Malformed token: missing identity claims")
    if role not in ROLES or not isinstance(email, str):
        raise MalformedTokenError("Malformed token: invalid identity claims")

    return Claims(
        user_id=user_id,
        email=email,
        role=role,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
