"""
Authentication API routes.
"""

from fastapi import APIRouter, Depends
import structlog

from models.user import (
    AuthSession,
    PasswordResetRequest,
    ProfileUpdate,
    SignInRequest,
    SignOutRequest,
    SignUpRequest,
    UserProfile,
)
from services.auth_service import AuthService
from routes.dependencies import get_auth_service, get_current_user
from routes.products import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/sign-up", response_model=AuthSession, status_code=201)
async def sign_up(
    data: SignUpRequest,
    service: AuthService = Depends(get_auth_service)
):
    """
    Create an account and its profile.

    Raises:
        409: Email already in use
        429: Too many attempts
    """
    try:
        return service.sign_up(data)

    except Exception as e:
        return handle_error(e)


@router.post("/sign-in", response_model=AuthSession)
async def sign_in(
    data: SignInRequest,
    service: AuthService = Depends(get_auth_service)
):
    """
    Sign in with email and password.

    Raises:
        401: Invalid credentials
        429: Too many attempts
    """
    try:
        return service.sign_in(data)

    except Exception as e:
        return handle_error(e)


@router.post("/sign-out", status_code=204)
async def sign_out(
    data: SignOutRequest,
    service: AuthService = Depends(get_auth_service)
):
    """End a session."""
    try:
        service.sign_out(data.access_token, data.refresh_token)
        return None

    except Exception as e:
        return handle_error(e)


@router.post("/reset-password", status_code=202)
async def reset_password(
    data: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a password-reset email."""
    try:
        service.reset_password(data.email, data.redirect_to)
        return {"status": "sent"}

    except Exception as e:
        return handle_error(e)


@router.get("/me", response_model=UserProfile)
async def current_user(user: UserProfile = Depends(get_current_user)):
    """
    Profile of the signed-in user.

    Raises:
        401: Missing or invalid token
    """
    return user


@router.patch("/me", response_model=UserProfile)
async def update_current_user(
    data: ProfileUpdate,
    user: UserProfile = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Update the signed-in user's own profile."""
    try:
        return service.update_profile(user.uid, data, acting_uid=user.uid)

    except Exception as e:
        return handle_error(e)
