"""
Authentication over Supabase Auth, paired with a profile document.

Every account has a row in the users table keyed by the auth user id.
Sign-up writes it; sign-in creates it if missing and otherwise bumps the
login counters.
"""

from collections import deque
from typing import Any, Callable, Optional
import time
import structlog

from config import create_auth_client, settings
from models.user import (
    AuthSession,
    ProfileUpdate,
    Role,
    ROLE_HIERARCHY,
    SignInRequest,
    SignUpRequest,
    UserProfile,
)
from services.document_store import SERVER_TIMESTAMP, encode_fields
from exceptions import (
    AuthError,
    DatabaseError,
    PermissionDeniedError,
    ProfileNotFoundError,
)

logger = structlog.get_logger(__name__)


# Provider error code -> (our code, safe message, HTTP status)
AUTH_ERROR_MESSAGES: dict[str, tuple[str, str, int]] = {
    "invalid_credentials": (
        "auth/invalid-credential", "Invalid email or password. Please try again.", 401
    ),
    "email_not_confirmed": (
        "auth/email-not-confirmed", "Please confirm your email address before signing in.", 401
    ),
    "user_already_exists": (
        "auth/email-already-in-use", "An account with this email already exists.", 409
    ),
    "email_exists": (
        "auth/email-already-in-use", "An account with this email already exists.", 409
    ),
    "weak_password": (
        "auth/weak-password", "Password is too weak. Please choose a stronger one.", 422
    ),
    "user_banned": (
        "auth/user-disabled", "This account has been disabled. Please contact support.", 403
    ),
    "over_request_rate_limit": (
        "auth/too-many-requests", "Too many attempts. Please wait 15 minutes and try again.", 429
    ),
    "over_email_send_rate_limit": (
        "auth/too-many-requests", "Too many attempts. Please wait 15 minutes and try again.", 429
    ),
    "session_not_found": (
        "auth/session-expired", "Your session has expired. Please sign in again.", 401
    ),
    "bad_jwt": (
        "auth/session-expired", "Your session has expired. Please sign in again.", 401
    ),
}

PROFILE_FIELDS = ("display_name", "phone", "address", "photo_url")
MAX_INPUT_LENGTH = 500


def sanitize_input(value: Any) -> str:
    """Trim, drop angle brackets and cap the length of user text."""
    if not isinstance(value, str):
        return ""
    return value.strip().replace("<", "").replace(">", "")[:MAX_INPUT_LENGTH]


def handle_auth_error(error: Exception) -> AuthError:
    """Map a provider error to an AuthError with a safe message."""
    if isinstance(error, AuthError):
        return error
    provider_code = getattr(error, "code", None)
    code, message, status = AUTH_ERROR_MESSAGES.get(
        provider_code,
        ("auth/unknown", "Authentication failed. Please try again.", 401)
    )
    return AuthError(code, message, status_code=status)


class AttemptLimiter:
    """
    Sliding-window attempt counter per key.

    In-process only; resets when the process restarts.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.clock = clock
        self._attempts: dict[str, deque] = {}

    def _count(self, key: str) -> int:
        attempts = self._attempts.get(key)
        if attempts is None:
            return 0
        cutoff = self.clock() - self.window_seconds
        while attempts and attempts[0] <= cutoff:
            attempts.popleft()
        if not attempts:
            # Nothing left in the window; forget the key
            del self._attempts[key]
            return 0
        return len(attempts)

    def is_limited(self, key: str) -> bool:
        return self._count(key) >= self.max_attempts

    def add_attempt(self, key: str) -> None:
        self._count(key)
        self._attempts.setdefault(key, deque()).append(self.clock())

    def remaining(self, key: str) -> int:
        return max(0, self.max_attempts - self._count(key))

    @property
    def tracked_keys(self) -> int:
        return len(self._attempts)


# Shared across requests; each request gets its own AuthService
attempt_limiter = AttemptLimiter()


class AuthService:
    """
    Sign-up, sign-in, sign-out, password reset and profile access.

    Holds its own Supabase client because the auth session lives on the
    client.
    """

    def __init__(self, client=None, limiter: Optional[AttemptLimiter] = None):
        self.db = client or create_auth_client()
        self.limiter = limiter or attempt_limiter
        self.table = settings.users_table

    # ===================
    # AUTH OPERATIONS
    # ===================

    def _check_rate_limit(self, email: str) -> None:
        if self.limiter.is_limited(email):
            logger.warning("auth_rate_limited", email=email)
            raise AuthError(
                "auth/too-many-requests",
                "Too many authentication attempts. Please try again later.",
                status_code=429
            )
        self.limiter.add_attempt(email)

    def sign_up(self, data: SignUpRequest) -> AuthSession:
        """
        Create an account and its profile document.

        Raises:
            AuthError: Provider rejected the sign-up or rate limited
        """
        self._check_rate_limit(data.email)
        display_name = sanitize_input(data.display_name) or "User"

        logger.info("sign_up_started", email=data.email)
        try:
            response = self.db.auth.sign_up({
                "email": data.email,
                "password": data.password,
                "options": {"data": {"display_name": display_name}},
            })
        except Exception as e:
            logger.error("sign_up_failed", email=data.email, code=getattr(e, "code", None))
            raise handle_auth_error(e) from e

        user = response.user
        if user is None or not user.id:
            raise AuthError("auth/invalid-response", "Authentication failed. Please try again.")

        profile = self._create_profile(user.id, user.email or data.email, display_name)
        logger.info("user_signed_up", uid=user.id)

        return self._session(response.session, profile)

    def sign_in(self, data: SignInRequest) -> AuthSession:
        """
        Password sign-in.

        Raises:
            AuthError: Bad credentials, unconfirmed email or rate limited
        """
        self._check_rate_limit(data.email)

        logger.info("sign_in_started", email=data.email)
        try:
            response = self.db.auth.sign_in_with_password({
                "email": data.email,
                "password": data.password,
            })
        except Exception as e:
            logger.error("sign_in_failed", email=data.email, code=getattr(e, "code", None))
            raise handle_auth_error(e) from e

        user = response.user
        if user is None or not user.id:
            raise AuthError("auth/invalid-response", "Authentication failed. Please try again.")

        existing = self.get_profile(user.id)
        if existing is None:
            metadata = getattr(user, "user_metadata", None) or {}
            profile = self._create_profile(
                user.id,
                user.email or data.email,
                sanitize_input(metadata.get("display_name")) or "User"
            )
        else:
            profile = self._record_login(existing)

        logger.info("user_signed_in", uid=user.id)
        return self._session(response.session, profile)

    def sign_out(self, access_token: str, refresh_token: str) -> None:
        """End the session identified by the token pair."""
        try:
            self.db.auth.set_session(access_token, refresh_token)
            self.db.auth.sign_out()
        except Exception as e:
            logger.error("sign_out_failed", code=getattr(e, "code", None))
            raise AuthError("auth/sign-out-failed", "Failed to sign out. Please try again.") from e

        logger.info("user_signed_out")

    def reset_password(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Send a password-reset email."""
        options = {}
        target = redirect_to or settings.auth_redirect_url
        if target:
            options["redirect_to"] = target

        try:
            self.db.auth.reset_password_for_email(email.lower(), options)
        except Exception as e:
            logger.error("password_reset_failed", email=email, code=getattr(e, "code", None))
            raise handle_auth_error(e) from e

        logger.info("password_reset_sent", email=email)

    def get_current_user(self, access_token: str) -> Optional[UserProfile]:
        """
        The signed-in user's profile for an access token.

        Returns None when the token does not resolve to a user.
        """
        try:
            response = self.db.auth.get_user(access_token)
        except Exception as e:
            logger.info("current_user_lookup_failed", code=getattr(e, "code", None))
            return None

        if response is None or response.user is None:
            return None

        user = response.user
        profile = self.get_profile(user.id)
        if profile is None:
            # Auth user without a profile document yet
            return UserProfile(uid=user.id, email=user.email or "")
        return profile

    # ===================
    # PROFILES
    # ===================

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        """Profile document for uid, or None."""
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("uid", uid)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("get_profile_failed", uid=uid, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            return None
        return UserProfile(**result.data[0])

    def _create_profile(self, uid: str, email: str, display_name: str) -> UserProfile:
        row = {
            "uid": uid,
            "email": email,
            "display_name": display_name,
            "photo_url": "",
            "role": Role.CUSTOMER.value,
            "phone": "",
            "address": "",
            "login_count": 1,
            "auth_provider": "email",
            "created_at": SERVER_TIMESTAMP,
            "updated_at": SERVER_TIMESTAMP,
            "last_login_at": SERVER_TIMESTAMP,
        }
        try:
            result = (
                self.db.table(self.table)
                .upsert(encode_fields(row), on_conflict="uid")
                .execute()
            )
        except Exception as e:
            logger.error("create_profile_failed", uid=uid, error=str(e))
            raise AuthError(
                "auth/profile-creation-failed",
                "Failed to create user profile. Please try again.",
                status_code=500
            ) from e

        logger.info("user_profile_created", uid=uid)
        if result.data:
            return UserProfile(**result.data[0])
        return UserProfile(**{k: v for k, v in row.items() if v is not SERVER_TIMESTAMP})

    def _record_login(self, profile: UserProfile) -> UserProfile:
        updates = {
            "login_count": profile.login_count + 1,
            "last_login_at": SERVER_TIMESTAMP,
            "updated_at": SERVER_TIMESTAMP,
        }
        try:
            result = (
                self.db.table(self.table)
                .update(encode_fields(updates))
                .eq("uid", profile.uid)
                .execute()
            )
        except Exception as e:
            logger.error("record_login_failed", uid=profile.uid, error=str(e))
            raise DatabaseError("update", str(e))

        if result.data:
            return UserProfile(**result.data[0])
        return profile.model_copy(update={"login_count": profile.login_count + 1})

    def update_profile(self, uid: str, data: ProfileUpdate, acting_uid: str) -> UserProfile:
        """
        Update whitelisted fields on the caller's own profile.

        Raises:
            PermissionDeniedError: acting_uid is not uid
            ProfileNotFoundError: No profile document for uid
        """
        if acting_uid != uid:
            raise PermissionDeniedError("Cannot update another user's profile")

        updates: dict[str, Any] = {}
        provided = data.model_dump(exclude_none=True)
        for field in PROFILE_FIELDS:
            if field in provided:
                updates[field] = sanitize_input(provided[field])

        if not updates:
            profile = self.get_profile(uid)
            if profile is None:
                raise ProfileNotFoundError(uid)
            return profile

        updates["updated_at"] = SERVER_TIMESTAMP
        try:
            result = (
                self.db.table(self.table)
                .update(encode_fields(updates))
                .eq("uid", uid)
                .execute()
            )
        except Exception as e:
            logger.error("update_profile_failed", uid=uid, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise ProfileNotFoundError(uid)

        logger.info("user_profile_updated", uid=uid, fields=[f for f in updates if f != "updated_at"])
        return UserProfile(**result.data[0])

    def has_role(self, uid: str, required_role: Role) -> bool:
        """Whether uid's role includes required_role."""
        profile = self.get_profile(uid)
        if profile is None:
            return False
        return required_role in ROLE_HIERARCHY.get(profile.role, set())

    # ===================
    # HELPERS
    # ===================

    @staticmethod
    def _session(session, profile: UserProfile) -> AuthSession:
        # No session when email confirmation is pending
        if session is None:
            return AuthSession(profile=profile)
        return AuthSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=getattr(session, "expires_in", None),
            profile=profile,
        )
