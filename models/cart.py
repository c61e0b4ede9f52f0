"""
Cart schemas.

A signed-in user's cart is one document keyed by their uid. Items are
keyed by (product_id, variant_id).
"""

from pydantic import Field
from typing import Optional
from datetime import datetime

from models.base import BaseSchema

CART_VERSION = "1.0"


class CartItem(BaseSchema):
    """A cart line with the pricing it currently qualifies for."""

    product_id: str = Field(..., min_length=1)
    variant_id: str = Field(..., min_length=1)
    product_name: str
    variant_name: str
    sku: str
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., gt=0)
    subtotal: float = Field(..., ge=0)
    image_url: str = ""
    applied_pricing: str = "retail"
    wholesale_price: float = Field(0, ge=0)
    retail_price: float = Field(..., gt=0)
    min_wholesale_qty: int = 10

    @property
    def key(self) -> tuple[str, str]:
        return (self.product_id, self.variant_id)


class Cart(BaseSchema):
    """Stored cart with its running totals."""

    items: list[CartItem] = Field(default_factory=list)
    total_items: int = 0
    subtotal: float = 0
    version: str = CART_VERSION
    updated_at: Optional[datetime] = None


class CartItemRequest(BaseSchema):
    """Add a variant to the cart."""

    product_id: str = Field(..., min_length=1)
    variant_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class CartQuantityUpdate(BaseSchema):
    quantity: int = Field(..., ge=1, description="Quantity must be at least 1")


class CartMergeRequest(BaseSchema):
    """Items from a cart kept on the device before sign-in."""

    items: list[CartItem] = Field(default_factory=list)
