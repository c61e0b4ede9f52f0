"""
Cart service.

Quantity-based pricing and the stored cart of a signed-in user. A line
of WHOLESALE_THRESHOLD or more units is charged the wholesale price
when the variant has one; anything smaller pays retail.
"""

from typing import Optional
import structlog

from config import get_supabase_client, settings
from models.cart import CART_VERSION, Cart, CartItem, CartItemRequest
from models.product import ProductResponse, Variant
from services.document_store import SERVER_TIMESTAMP, encode_fields
from services.product_service import ProductService, get_product_service
from exceptions import (
    CartItemNotFoundError,
    DatabaseError,
    ValidationError,
    VariantNotFoundError,
)

logger = structlog.get_logger(__name__)

WHOLESALE_THRESHOLD = 10


# ===================
# PRICING
# ===================

def calculate_unit_price(
    wholesale_price: float,
    retail_price: float,
    quantity: int
) -> tuple[float, str]:
    """Unit price and pricing type ("retail" or "wholesale") for a quantity."""
    if quantity >= WHOLESALE_THRESHOLD and wholesale_price:
        return wholesale_price, "wholesale"
    return retail_price, "retail"


def calculate_totals(items: list[CartItem]) -> tuple[int, float]:
    """(total units, subtotal) over the cart lines."""
    return (
        sum(item.quantity for item in items),
        sum(item.subtotal for item in items),
    )


def available_variant(product: ProductResponse, variant_id: str) -> Variant:
    """
    The product's variant, if it can be bought right now.

    Raises:
        ValidationError: Product inactive or deleted, or variant out of stock
        VariantNotFoundError: No such variant on the product
    """
    if not product.is_active or product.deleted_at is not None:
        raise ValidationError(
            f"{product.name} is not available",
            code="PRODUCT_UNAVAILABLE",
            details={"product_id": product.id}
        )

    variant = next((v for v in product.variants if v.id == variant_id), None)
    if variant is None:
        raise VariantNotFoundError(product.id, variant_id)

    if not variant.in_stock:
        raise ValidationError(
            f"{product.name} ({variant.name}) is out of stock",
            code="OUT_OF_STOCK",
            details={"product_id": product.id, "variant_id": variant_id}
        )

    return variant


def new_item(product: ProductResponse, variant: Variant, quantity: int) -> CartItem:
    """A priced cart line for `quantity` units of a variant."""
    price, pricing = calculate_unit_price(variant.wholesale_price, variant.retail_price, quantity)
    return CartItem(
        product_id=product.id,
        variant_id=variant.id,
        product_name=product.name,
        variant_name=variant.name,
        sku=variant.sku,
        quantity=quantity,
        unit_price=price,
        subtotal=price * quantity,
        image_url=product.image_url,
        applied_pricing=pricing,
        wholesale_price=variant.wholesale_price,
        retail_price=variant.retail_price,
        min_wholesale_qty=product.min_wholesale_qty or WHOLESALE_THRESHOLD,
    )


def reprice(item: CartItem, quantity: int) -> CartItem:
    """The same line at a new quantity, repriced."""
    price, pricing = calculate_unit_price(item.wholesale_price, item.retail_price, quantity)
    return item.model_copy(update={
        "quantity": quantity,
        "unit_price": price,
        "subtotal": price * quantity,
        "applied_pricing": pricing,
    })


def merge_items(stored: list[CartItem], local: list[CartItem]) -> list[CartItem]:
    """
    Stored lines win; local lines for variants not already stored are
    appended in their original order.
    """
    keys = {item.key for item in stored}
    return list(stored) + [item for item in local if item.key not in keys]


# ===================
# STORED CART
# ===================

class CartService:
    """
    A signed-in user's cart, one row per user in the carts table.

    Every change rewrites the whole row with fresh totals.
    """

    def __init__(self, products: Optional[ProductService] = None):
        self.db = get_supabase_client()
        self.table = settings.carts_table
        self.products = products or get_product_service()

    def get_cart(self, user_id: str) -> Cart:
        """The user's stored cart, or an empty one."""
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("get_cart_failed", user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            return Cart()

        row = result.data[0]
        if row.get("version") != CART_VERSION:
            logger.warning(
                "cart_version_mismatch",
                user_id=user_id,
                version=row.get("version")
            )
            return Cart()

        return Cart(**row)

    def save_cart(self, user_id: str, items: list[CartItem]) -> Cart:
        """Replace the user's cart with `items`."""
        total_items, subtotal = calculate_totals(items)
        row = {
            "user_id": user_id,
            "items": [item.model_dump(mode="json") for item in items],
            "total_items": total_items,
            "subtotal": subtotal,
            "version": CART_VERSION,
            "updated_at": SERVER_TIMESTAMP,
        }

        try:
            result = (
                self.db.table(self.table)
                .upsert(encode_fields(row), on_conflict="user_id")
                .execute()
            )
        except Exception as e:
            logger.error("save_cart_failed", user_id=user_id, error=str(e))
            raise DatabaseError("upsert", str(e))

        logger.info("cart_saved", user_id=user_id, lines=len(items), total_items=total_items)
        return Cart(**result.data[0])

    def add_item(self, user_id: str, request: CartItemRequest) -> Cart:
        """
        Add units of a variant, merging with an existing line.

        Raises:
            ProductNotFoundError: If product doesn't exist
            VariantNotFoundError: If the variant is not on the product
            ValidationError: If the product cannot be bought
        """
        product = self.products.get_by_id(request.product_id)
        variant = available_variant(product, request.variant_id)

        items = self.get_cart(user_id).items
        key = (request.product_id, request.variant_id)
        index = next((i for i, item in enumerate(items) if item.key == key), None)

        if index is None:
            items.append(new_item(product, variant, request.quantity))
        else:
            items[index] = reprice(items[index], items[index].quantity + request.quantity)

        return self.save_cart(user_id, items)

    def update_quantity(self, user_id: str, product_id: str, variant_id: str, quantity: int) -> Cart:
        """
        Set a line's quantity and reprice it.

        Raises:
            ValidationError: If quantity is below 1
            CartItemNotFoundError: If the line is not in the cart
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", code="INVALID_QUANTITY")

        items = self.get_cart(user_id).items
        index = next(
            (i for i, item in enumerate(items) if item.key == (product_id, variant_id)),
            None
        )
        if index is None:
            raise CartItemNotFoundError(product_id, variant_id)

        items[index] = reprice(items[index], quantity)
        return self.save_cart(user_id, items)

    def remove_item(self, user_id: str, product_id: str, variant_id: str) -> Cart:
        items = [
            item for item in self.get_cart(user_id).items
            if item.key != (product_id, variant_id)
        ]
        return self.save_cart(user_id, items)

    def clear(self, user_id: str) -> Cart:
        return self.save_cart(user_id, [])

    def merge(self, user_id: str, local_items: list[CartItem]) -> Cart:
        """Fold a device cart into the stored one after sign-in."""
        stored = self.get_cart(user_id).items
        merged = merge_items(stored, local_items)

        logger.info(
            "cart_merged",
            user_id=user_id,
            stored=len(stored),
            added=len(merged) - len(stored)
        )
        return self.save_cart(user_id, merged)


# Singleton instance for convenience
_cart_service: Optional[CartService] = None

def get_cart_service() -> CartService:
    """Get or create CartService instance."""
    global _cart_service
    if _cart_service is None:
        _cart_service = CartService()
    return _cart_service
