"""
User profile and authentication schemas.
"""

from pydantic import Field, field_validator
from typing import Optional
from enum import Enum
from datetime import datetime

from models.base import BaseSchema, TimestampMixin


class Role(str, Enum):
    """User roles, highest first."""
    ADMIN = "admin"
    DISPATCHER = "dispatcher"
    DRIVER = "driver"
    CUSTOMER = "customer"


# Each role includes itself and every role listed after it
ROLE_HIERARCHY: dict[Role, set[Role]] = {
    Role.ADMIN: {Role.ADMIN, Role.DISPATCHER, Role.DRIVER, Role.CUSTOMER},
    Role.DISPATCHER: {Role.DISPATCHER, Role.DRIVER, Role.CUSTOMER},
    Role.DRIVER: {Role.DRIVER, Role.CUSTOMER},
    Role.CUSTOMER: {Role.CUSTOMER},
}


class UserProfile(BaseSchema, TimestampMixin):
    """Profile document paired with an auth user."""

    uid: str
    email: str
    display_name: str = "User"
    photo_url: str = ""
    role: Role = Role.CUSTOMER
    phone: str = ""
    address: str = ""
    login_count: int = 0
    auth_provider: str = "email"
    last_login_at: Optional[datetime] = None


class SignUpRequest(BaseSchema):
    """New account with email and password."""

    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=6)
    display_name: str = Field("User", max_length=500)

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, v: str) -> str:
        return v.lower()


class SignInRequest(BaseSchema):
    """Email and password sign-in."""

    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, v: str) -> str:
        return v.lower()


class SignOutRequest(BaseSchema):
    """Tokens of the session to end."""

    access_token: str
    refresh_token: str


class PasswordResetRequest(BaseSchema):
    """Send a password-reset email."""

    email: str = Field(..., min_length=3, max_length=320)
    redirect_to: Optional[str] = None


class ProfileUpdate(BaseSchema):
    """
    Fields a user may change on their own profile.

    Anything else (role, email, counters) is ignored.
    """

    display_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    photo_url: Optional[str] = None


class AuthSession(BaseSchema):
    """Tokens plus profile returned after sign-in or sign-up."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    profile: UserProfile
