"""
Bearer token verification.

Tokens are issued by the Supabase auth provider and signed with the
project's JWT secret. This service only verifies them; sign-up and
sign-in happen against the provider directly.
"""

from typing import Any, Dict, Optional

import jwt
import structlog
from fastapi import Depends, Header
from pydantic import BaseModel

from .config import settings
from .domain.entities import CartOwner, UserRole
from .exceptions import (
    AuthenticationException,
    CartOwnerRequiredException,
    PermissionDeniedException,
)

logger = structlog.get_logger(__name__)


class CurrentUser(BaseModel):
    """User information from a verified token."""

    id: str
    email: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER

    @property
    def is_staff(self) -> bool:
        return self.role.is_staff


def _role_from_claims(payload: Dict[str, Any]) -> UserRole:
    """
    Pick the application role from token claims.

    Supabase puts ``authenticated`` in the top-level ``role`` claim; the
    application role lives in ``app_metadata.role`` or a ``user_role``
    custom claim.
    """
    app_metadata = payload.get("app_metadata")
    if not isinstance(app_metadata, dict):
        app_metadata = {}

    candidates = (
        app_metadata.get("role"),
        payload.get("user_role"),
        payload.get("role"),
    )
    for candidate in candidates:
        try:
            return UserRole(candidate)
        except ValueError:
            continue
    return UserRole.CUSTOMER


def decode_token(token: str) -> CurrentUser:
    """
    Decode and validate a bearer token.

    Args:
        token: The JWT from the Authorization header

    Returns:
        CurrentUser built from the token claims

    Raises:
        AuthenticationException: If the token is expired or invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        logger.info("Bearer token expired")
        raise AuthenticationException("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info("Invalid bearer token", error=str(e))
        raise AuthenticationException(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationException("Token has no subject")

    return CurrentUser(id=user_id, email=payload.get("email"), role=_role_from_claims(payload))


def _extract_bearer(authorization: str) -> str:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationException("Invalid authorization header format. Expected 'Bearer <token>'")
    return token.strip()


async def get_optional_user(authorization: Optional[str] = Header(None)) -> Optional[CurrentUser]:
    """
    FastAPI dependency returning the signed-in user, or None for guests.

    A malformed or invalid token is still an error.
    """
    if not authorization:
        return None
    return decode_token(_extract_bearer(authorization))


async def get_current_user(authorization: Optional[str] = Header(None)) -> CurrentUser:
    """
    FastAPI dependency requiring a signed-in user.

    Raises:
        AuthenticationException: If the header is missing or the token is invalid
    """
    if not authorization:
        raise AuthenticationException("Authorization header required")
    return decode_token(_extract_bearer(authorization))


async def require_staff(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """FastAPI dependency requiring a staff or admin user."""
    if not user.is_staff:
        logger.info("Staff access denied", user_id=user.id, role=user.role.value)
        raise PermissionDeniedException(UserRole.STAFF.value)
    return user


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """FastAPI dependency requiring an admin user."""
    if user.role != UserRole.ADMIN:
        logger.info("Admin access denied", user_id=user.id, role=user.role.value)
        raise PermissionDeniedException(UserRole.ADMIN.value)
    return user


async def get_cart_owner(
    user: Optional[CurrentUser] = Depends(get_optional_user),
    x_guest_session: Optional[str] = Header(None),
) -> CartOwner:
    """
    FastAPI dependency resolving who owns the cart or wishlist.

    Raises:
        CartOwnerRequiredException: If there is neither a user nor a guest session
    """
    if user is not None:
        return CartOwner.user(user.id)
    if x_guest_session and x_guest_session.strip():
        return CartOwner.guest(x_guest_session.strip())
    raise CartOwnerRequiredException()
