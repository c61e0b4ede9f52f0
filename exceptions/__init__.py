"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    ExternalServiceError,
    DatabaseError,
    ConfigurationError,
    DatabaseConnectionError,

    # Product-specific
    ProductNotFoundError,
    VariantNotFoundError,

    # Orders and carts
    OrderNotFoundError,
    CartItemNotFoundError,

    # Seeding
    BatchCommitError,

    # Auth
    AuthError,
    PermissionDeniedError,
    ProfileNotFoundError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",
    "DatabaseError",
    "ConfigurationError",
    "DatabaseConnectionError",

    # Product
    "ProductNotFoundError",
    "VariantNotFoundError",

    # Orders and carts
    "OrderNotFoundError",
    "CartItemNotFoundError",

    # Seeding
    "BatchCommitError",

    # Auth
    "AuthError",
    "PermissionDeniedError",
    "ProfileNotFoundError",
]
