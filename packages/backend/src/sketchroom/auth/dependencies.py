"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request. The bearer token
is the only credential; its claims are trusted as-is for the rest of
the request.
"""

from typing import Optional

from fastapi import Depends, Header

from sketchroom.auth.jwt import Claims, verify_token
from sketchroom.errors import AdminRequiredError, AuthenticationError

# The identity handed to handlers is exactly the decoded token.
CurrentIdentity = Claims


def get_current_user_optional(
    authorization: Optional[str] = Header(None),
) -> Optional[CurrentIdentity]:
    """Extract current identity (optional — returns None if no auth)."""
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Invalid authorization header")
    return verify_token(token.strip())


def get_current_user(
    identity: Optional[CurrentIdentity] = Depends(get_current_user_optional),
) -> CurrentIdentity:
    """Extract current identity (required — 401 if no auth)."""
    if identity is None:
        raise AuthenticationError("Authentication required")
    return identity


def require_admin(
    identity: CurrentIdentity = Depends(get_current_user),
) -> CurrentIdentity:
    """Admin-only routes. 403 for any other role."""
    if not identity.is_admin:
        raise AdminRequiredError()
    return identity
