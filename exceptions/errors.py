"""
Custom exception classes for the application.

Every error carries a stable code, a safe message and an HTTP status so
routes can return it as-is and scripts can print it.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


class ConfigurationError(AppError):
    """Required configuration is missing (500)."""

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=message,
            status_code=500,
            details={"missing": missing or []}
        )


class DatabaseConnectionError(ExternalServiceError):
    """Failed to connect to the store."""

    def __init__(self, message: str):
        super().__init__(
            service="supabase",
            message=f"Failed to connect to Supabase: {message}"
        )


# ===================
# PRODUCT ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, product_id: str):
        super().__init__(
            resource="Product",
            identifier=product_id,
            code="PRODUCT_NOT_FOUND"
        )


class VariantNotFoundError(NotFoundError):
    """Variant not found on its product."""

    def __init__(self, product_id: str, variant_id: str):
        super().__init__(
            resource="Variant",
            identifier=variant_id,
            code="VARIANT_NOT_FOUND"
        )
        self.details["product_id"] = product_id


# ===================
# ORDER ERRORS
# ===================

class OrderNotFoundError(NotFoundError):
    """Order not found."""

    def __init__(self, order_id: str):
        super().__init__(
            resource="Order",
            identifier=order_id,
            code="ORDER_NOT_FOUND"
        )


class CartItemNotFoundError(NotFoundError):
    """No cart line for this product variant."""

    def __init__(self, product_id: str, variant_id: str):
        super().__init__(
            resource="Cart item",
            identifier=f"{product_id}-{variant_id}",
            code="CART_ITEM_NOT_FOUND"
        )


# ===================
# SEEDING ERRORS
# ===================

class BatchCommitError(AppError):
    """
    A batch commit failed during seeding.

    Batches before batch_number are already written and stay written.
    """

    def __init__(self, batch_number: int, operations: int, cause: str):
        self.batch_number = batch_number
        self.operations = operations
        super().__init__(
            code="BATCH_COMMIT_FAILED",
            message=f"Committing batch {batch_number} failed: {cause}",
            status_code=502,
            details={
                "batch_number": batch_number,
                "operations": operations,
                "cause": cause
            }
        )


# ===================
# AUTH ERRORS
# ===================

class AuthError(AppError):
    """
    Authentication failed.

    Codes follow the "auth/<reason>" form; messages are safe to show.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 401
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status_code
        )


class PermissionDeniedError(AppError):
    """Caller may not perform the action (403)."""

    def __init__(self, message: str):
        super().__init__(
            code="PERMISSION_DENIED",
            message=message,
            status_code=403
        )


class ProfileNotFoundError(NotFoundError):
    """User profile document not found."""

    def __init__(self, uid: str):
        super().__init__(
            resource="Profile",
            identifier=uid,
            code="PROFILE_NOT_FOUND"
        )
