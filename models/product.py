"""
Product schemas for validation and serialization.

Catalog records are immutable values; a product owns its ordered
variants, which have no lifecycle of their own.
"""

from pydantic import ConfigDict, Field, field_validator
from typing import Any, Optional
from enum import Enum
from datetime import datetime

from models.base import BaseSchema, TimestampMixin


class Category(str, Enum):
    """Product categories."""
    FEEDERS = "Feeders"
    DRINKERS = "Drinkers"
    BROODING_EQUIPMENT = "Brooding Equipment"
    AUTOMATIC_INCUBATORS = "Automatic Incubators"
    CAGES_AND_MESH = "Cages & Mesh"
    CHICKENS = "Chickens"


class Variant(BaseSchema):
    """
    A purchasable option of a product (size, capacity, age bracket).

    Retail is expected to be at or above wholesale but that is not
    enforced; the catalog has items sold at a single price.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique within the parent product")
    name: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1, description="Stock-keeping code")
    wholesale_price: float = Field(..., ge=0, description="Wholesale price (WP)")
    retail_price: float = Field(..., ge=0, description="Retail price (RP)")
    in_stock: bool = True
    stock_quantity: int = Field(0, ge=0)
    low_stock_threshold: int = Field(10, ge=0)


class Product(BaseSchema):
    """
    Catalog product, stored as one document keyed by id.

    An empty variant list is accepted; seeding then counts zero
    variants for it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable document key")
    name: str = Field(..., min_length=1)
    category: Category
    description: str = ""
    image_url: str = ""
    unit: str = Field("piece", description="Unit of sale")
    min_wholesale_qty: int = Field(1, ge=0)
    is_active: bool = True
    variants: tuple[Variant, ...] = ()
    specifications: dict[str, str] = Field(default_factory=dict)

    @property
    def variant_count(self) -> int:
        return len(self.variants)

    def to_document(self) -> dict[str, Any]:
        """Field map written to the store (JSON-ready)."""
        return self.model_dump(mode="json")


class ProductResponse(Product, TimestampMixin):
    """Product as read back from the store."""

    deleted_at: Optional[datetime] = None


class ProductUpdate(BaseSchema):
    """
    Update existing product.

    All fields optional - only provided fields are updated.
    """

    name: Optional[str] = Field(None, min_length=1)
    category: Optional[Category] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    unit: Optional[str] = None
    min_wholesale_qty: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    specifications: Optional[dict[str, str]] = None

    def to_fields(self) -> dict[str, Any]:
        """Only the fields the caller actually set."""
        return self.model_dump(mode="json", exclude_none=True)


class StockAdjustment(BaseSchema):
    """Set a variant's stock to a new absolute quantity."""

    variant_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    reason: str = Field(..., min_length=1, max_length=500)

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please provide a reason for this stock adjustment")
        return v


class StockMovement(BaseSchema):
    """Audit row for one stock adjustment."""

    product_id: str
    product_name: str
    variant_id: str
    variant_name: str
    sku: str
    type: str = "adjustment"
    previous_quantity: int
    new_quantity: int
    difference: int
    reason: str
    updated_by: Optional[str] = None


class InventoryItem(BaseSchema):
    """One variant row of the inventory report."""

    product_id: str
    product_name: str
    category: Category
    variant_id: str
    variant_name: str
    sku: str
    stock_quantity: int
    low_stock_threshold: int
    is_low_stock: bool
    is_out_of_stock: bool


class InventoryReport(BaseSchema):
    """Stock overview across variants."""

    items: list[InventoryItem]
    total_variants: int
    low_stock_count: int
    out_of_stock_count: int


class ProductListResponse(BaseSchema):
    """List of products."""

    data: list[ProductResponse]
    total: int
