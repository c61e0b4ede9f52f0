"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
)
from models.product import (
    Category,
    Variant,
    Product,
    ProductResponse,
    ProductUpdate,
    ProductListResponse,
    StockAdjustment,
    StockMovement,
    InventoryItem,
    InventoryReport,
)
from models.user import (
    Role,
    ROLE_HIERARCHY,
    UserProfile,
    SignUpRequest,
    SignInRequest,
    SignOutRequest,
    PasswordResetRequest,
    ProfileUpdate,
    AuthSession,
)
from models.order import (
    OrderStatus,
    DeliveryAddress,
    OrderItem,
    OrderItemRequest,
    OrderCreate,
    StatusChange,
    AdminNote,
    OrderResponse,
    OrderListResponse,
    OrderStatusUpdate,
    AdminNoteCreate,
    OrderCancel,
    OrderStats,
)
from models.cart import (
    CART_VERSION,
    CartItem,
    Cart,
    CartItemRequest,
    CartQuantityUpdate,
    CartMergeRequest,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Product
    "Category",
    "Variant",
    "Product",
    "ProductResponse",
    "ProductUpdate",
    "ProductListResponse",
    "StockAdjustment",
    "StockMovement",
    "InventoryItem",
    "InventoryReport",

    # User
    "Role",
    "ROLE_HIERARCHY",
    "UserProfile",
    "SignUpRequest",
    "SignInRequest",
    "SignOutRequest",
    "PasswordResetRequest",
    "ProfileUpdate",
    "AuthSession",

    # Order
    "OrderStatus",
    "DeliveryAddress",
    "OrderItem",
    "OrderItemRequest",
    "OrderCreate",
    "StatusChange",
    "AdminNote",
    "OrderResponse",
    "OrderListResponse",
    "OrderStatusUpdate",
    "AdminNoteCreate",
    "OrderCancel",
    "OrderStats",

    # Cart
    "CART_VERSION",
    "CartItem",
    "Cart",
    "CartItemRequest",
    "CartQuantityUpdate",
    "CartMergeRequest",
]
