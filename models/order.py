"""
Order schemas for validation and serialization.

An order snapshots the cart at checkout: item names and prices are
copied in, so later catalog edits do not change placed orders.
"""

from pydantic import Field
from typing import Optional
from enum import Enum
from datetime import datetime

from models.base import BaseSchema, TimestampMixin


class OrderStatus(str, Enum):
    """Order lifecycle states."""
    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryAddress(BaseSchema):
    """Where the order goes."""

    street: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    county: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field("", max_length=20)


class OrderItem(BaseSchema):
    """One priced line of a placed order."""

    product_id: str
    product_name: str
    variant_id: str
    variant_name: str
    sku: str
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)
    subtotal: float = Field(..., ge=0)
    applied_pricing: str = Field(..., description="retail or wholesale")
    image_url: str = ""


class OrderItemRequest(BaseSchema):
    """A line the customer wants to buy; prices are looked up server-side."""

    product_id: str = Field(..., min_length=1)
    variant_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class OrderCreate(BaseSchema):
    """Checkout request."""

    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_email: str = Field(..., min_length=3, max_length=320)
    customer_phone: str = Field(..., min_length=1, max_length=50)
    items: list[OrderItemRequest] = Field(..., min_length=1)
    delivery_address: DeliveryAddress
    delivery_method: str = Field("standard", pattern="^standard$")
    delivery_instructions: str = Field("", max_length=1000)
    payment_method: str = Field("cod", pattern="^cod$", description="Cash on delivery only")


class StatusChange(BaseSchema):
    """Entry in an order's status history."""

    status: OrderStatus
    timestamp: datetime
    updated_by: str
    note: str = ""


class AdminNote(BaseSchema):
    """Internal note left on an order by an admin."""

    note: str
    added_by: str
    added_at: datetime


class OrderResponse(BaseSchema, TimestampMixin):
    """Order as read back from the store."""

    id: str
    order_number: str
    user_id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    items: list[OrderItem]
    subtotal: float
    delivery_fee: float
    total: float
    delivery_address: DeliveryAddress
    delivery_method: str = "standard"
    delivery_instructions: str = ""
    payment_method: str = "cod"
    payment_status: str = "pending"
    status: OrderStatus
    status_history: list[StatusChange] = Field(default_factory=list)
    admin_notes: list[AdminNote] = Field(default_factory=list)
    confirmed_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class OrderListResponse(BaseSchema):
    """List of orders."""

    data: list[OrderResponse]
    total: int


class OrderStatusUpdate(BaseSchema):
    """Admin moves an order to a new status."""

    status: OrderStatus
    note: str = Field("", max_length=500)


class AdminNoteCreate(BaseSchema):
    note: str = Field(..., min_length=1, max_length=1000)


class OrderCancel(BaseSchema):
    reason: str = Field("Cancelled by customer", min_length=1, max_length=500)


class OrderStats(BaseSchema):
    """Dashboard counters."""

    today_orders: int = 0
    pending_confirmation: int = 0
    processing: int = 0
    out_for_delivery: int = 0
    today_revenue: float = 0
    total_orders: int = 0
