"""
Request dependencies shared by the routers.

Auth failures raise AuthError / PermissionDeniedError and are turned into
the JSON error envelope by the app-level AppError handler.
"""

from fastapi import Depends, Header
from typing import Optional

from models.user import Role, UserProfile
from services.auth_service import AuthService
from exceptions import AuthError, PermissionDeniedError


def get_auth_service() -> AuthService:
    """A fresh service (and client) per request."""
    return AuthService()


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an "Authorization: Bearer <token>" header."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise AuthError("auth/missing-token", "Authentication required.")
    token = authorization[7:].strip()
    if not token:
        raise AuthError("auth/missing-token", "Authentication required.")
    return token


def get_current_user(
    authorization: Optional[str] = Header(None),
    service: AuthService = Depends(get_auth_service),
) -> UserProfile:
    """
    Profile of the caller.

    Raises:
        AuthError (401): Missing, invalid or expired token
    """
    profile = service.get_current_user(bearer_token(authorization))
    if profile is None:
        raise AuthError("auth/session-expired", "Your session has expired. Please sign in again.")
    return profile


def require_admin(
    current_user: UserProfile = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> UserProfile:
    """
    Caller must hold the admin role.

    Raises:
        PermissionDeniedError (403): Signed in but not an admin
    """
    if not service.has_role(current_user.uid, Role.ADMIN):
        raise PermissionDeniedError("Admin access required")
    return current_user
