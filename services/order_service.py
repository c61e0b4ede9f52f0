"""
Order service.

Checkout prices every line from the current catalog, never from the
client. Orders are cash on delivery and start out waiting for an admin
to confirm them.
"""

from typing import Any, Callable, Optional
from datetime import datetime, timezone
import structlog

from config import get_supabase_client, settings
from models.order import (
    OrderCreate,
    OrderItem,
    OrderResponse,
    OrderStats,
    OrderStatus,
)
from services.cart_service import available_variant, calculate_unit_price
from services.document_store import SERVER_TIMESTAMP, encode_fields
from services.product_service import ProductService, get_product_service
from exceptions import (
    ConflictError,
    DatabaseError,
    OrderNotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# Counties served from the Nairobi depot
NAIROBI_REGION = frozenset({"Nairobi", "Kiambu", "Kajiado", "Machakos"})
NAIROBI_DELIVERY_FEE = 500
DEFAULT_DELIVERY_FEE = 1000

CUSTOMER_CANCELLABLE = frozenset({OrderStatus.PENDING_CONFIRMATION, OrderStatus.CONFIRMED})
FINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# Status -> column stamped the first time an order reaches it
MILESTONES = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


def delivery_fee(county: str) -> int:
    """Delivery fee in KES for a county."""
    if county in NAIROBI_REGION:
        return NAIROBI_DELIVERY_FEE
    return DEFAULT_DELIVERY_FEE


class OrderService:
    """
    Order business logic.

    Handles checkout, lookups, status changes, admin notes,
    cancellation and dashboard stats.
    """

    def __init__(
        self,
        products: Optional[ProductService] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.db = get_supabase_client()
        self.table = settings.orders_table
        self.products = products or get_product_service()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    # ===================
    # CHECKOUT
    # ===================

    def _price_items(self, data: OrderCreate) -> list[OrderItem]:
        items = []
        for line in data.items:
            product = self.products.get_by_id(line.product_id)
            variant = available_variant(product, line.variant_id)
            price, pricing = calculate_unit_price(
                variant.wholesale_price, variant.retail_price, line.quantity
            )
            items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    variant_id=variant.id,
                    variant_name=variant.name,
                    sku=variant.sku,
                    quantity=line.quantity,
                    unit_price=price,
                    subtotal=price * line.quantity,
                    applied_pricing=pricing,
                    image_url=product.image_url,
                )
            )
        return items

    def _next_order_number(self) -> str:
        """MS-<year>-<NNNN>, numbered by how many orders exist."""
        try:
            result = self.db.table(self.table).select("id", count="exact").execute()
        except Exception as e:
            logger.error("count_orders_failed", error=str(e))
            raise DatabaseError("count", str(e))

        count = (result.count or 0) + 1
        return f"MS-{self.clock().year}-{count:04d}"

    def create(self, user_id: str, data: OrderCreate) -> OrderResponse:
        """
        Place an order for the signed-in user.

        Raises:
            ProductNotFoundError: If a product doesn't exist
            VariantNotFoundError: If a variant is not on its product
            ValidationError: If a line cannot be bought
        """
        logger.info("creating_order", user_id=user_id, lines=len(data.items))

        items = self._price_items(data)
        subtotal = sum(item.subtotal for item in items)
        fee = delivery_fee(data.delivery_address.county)

        row = {
            "order_number": self._next_order_number(),
            "user_id": user_id,
            "customer_name": data.customer_name,
            "customer_email": data.customer_email.lower(),
            "customer_phone": data.customer_phone,
            "items": [item.model_dump(mode="json") for item in items],
            "subtotal": subtotal,
            "delivery_fee": fee,
            "total": subtotal + fee,
            "delivery_address": data.delivery_address.model_dump(mode="json"),
            "delivery_method": data.delivery_method,
            "delivery_instructions": data.delivery_instructions,
            "payment_method": data.payment_method,
            "payment_status": "pending",
            "status": OrderStatus.PENDING_CONFIRMATION.value,
            "status_history": [
                self._history_entry(OrderStatus.PENDING_CONFIRMATION, "customer", "Order placed")
            ],
            "admin_notes": [],
            "created_at": SERVER_TIMESTAMP,
            "updated_at": SERVER_TIMESTAMP,
            "confirmed_at": None,
            "delivered_at": None,
            "cancelled_at": None,
        }

        try:
            result = self.db.table(self.table).insert(encode_fields(row)).execute()
        except Exception as e:
            logger.error("create_order_failed", user_id=user_id, error=str(e))
            raise DatabaseError("insert", str(e))

        order = OrderResponse(**result.data[0])

        logger.info(
            "order_created",
            order_id=order.id,
            order_number=order.order_number,
            total=order.total
        )

        return order

    # ===================
    # READ OPERATIONS
    # ===================

    def _get_row(self, order_id: str) -> dict[str, Any]:
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", order_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("get_order_failed", order_id=order_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise OrderNotFoundError(order_id)

        return result.data[0]

    def get_by_id(self, order_id: str) -> OrderResponse:
        """
        Get a single order by ID.

        Raises:
            OrderNotFoundError: If order doesn't exist
        """
        return OrderResponse(**self._get_row(order_id))

    def get_user_orders(self, user_id: str) -> list[OrderResponse]:
        """A customer's orders, newest first."""
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error("get_user_orders_failed", user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

        return [OrderResponse(**row) for row in result.data]

    def get_all(self, status: Optional[str] = None) -> list[OrderResponse]:
        """
        All orders, newest first.

        Args:
            status: Only orders in this status; None or "all" for every order

        Raises:
            ValidationError: If status is not a known order status
        """
        query = self.db.table(self.table).select("*")

        if status and status != "all":
            try:
                query = query.eq("status", OrderStatus(status).value)
            except ValueError:
                raise ValidationError(
                    f"Unknown order status: {status}",
                    code="INVALID_STATUS",
                    details={"allowed": [s.value for s in OrderStatus]}
                )

        try:
            result = query.order("created_at", desc=True).execute()
        except Exception as e:
            logger.error("get_orders_failed", status=status, error=str(e))
            raise DatabaseError("select", str(e))

        return [OrderResponse(**row) for row in result.data]

    # ===================
    # WRITE OPERATIONS
    # ===================

    def _history_entry(self, status: OrderStatus, updated_by: str, note: str) -> dict[str, Any]:
        return {
            "status": status.value,
            "timestamp": self.clock().isoformat(),
            "updated_by": updated_by,
            "note": note,
        }

    def _write(self, order_id: str, fields: dict[str, Any], operation: str) -> OrderResponse:
        fields = {**fields, "updated_at": SERVER_TIMESTAMP}
        try:
            result = (
                self.db.table(self.table)
                .update(encode_fields(fields))
                .eq("id", order_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"{operation}_failed", order_id=order_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise OrderNotFoundError(order_id)

        return OrderResponse(**result.data[0])

    def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        updated_by: str,
        note: str = ""
    ) -> OrderResponse:
        """
        Move an order to `status` and record it in the history.

        confirmed_at, delivered_at and cancelled_at are stamped the
        first time the order reaches that status and never moved.

        Raises:
            OrderNotFoundError: If order doesn't exist
        """
        logger.info("updating_order_status", order_id=order_id, status=status.value)

        row = self._get_row(order_id)
        history = list(row.get("status_history") or [])
        history.append(
            self._history_entry(status, updated_by, note or f"Status changed to {status.value}")
        )

        fields: dict[str, Any] = {"status": status.value, "status_history": history}
        milestone = MILESTONES.get(status)
        if milestone and not row.get(milestone):
            fields[milestone] = SERVER_TIMESTAMP

        order = self._write(order_id, fields, "update_order_status")

        logger.info(
            "order_status_updated",
            order_id=order_id,
            previous=row.get("status"),
            status=status.value
        )

        return order

    def add_admin_note(self, order_id: str, note: str, admin_id: str) -> OrderResponse:
        """Append an internal note."""
        row = self._get_row(order_id)
        notes = list(row.get("admin_notes") or [])
        notes.append({
            "note": note,
            "added_by": admin_id,
            "added_at": self.clock().isoformat(),
        })

        order = self._write(order_id, {"admin_notes": notes}, "add_admin_note")
        logger.info("admin_note_added", order_id=order_id, admin_id=admin_id)
        return order

    def cancel(
        self,
        order_id: str,
        cancelled_by: str,
        reason: str = "Cancelled by customer",
        by_admin: bool = False
    ) -> OrderResponse:
        """
        Cancel an order.

        Customers can cancel until the order goes into processing; admins
        can cancel anything not yet delivered or cancelled.

        Raises:
            OrderNotFoundError: If order doesn't exist
            ConflictError: If the order is past the point of cancelling
        """
        order = self.get_by_id(order_id)
        allowed = (
            order.status not in FINAL_STATUSES if by_admin
            else order.status in CUSTOMER_CANCELLABLE
        )
        if not allowed:
            raise ConflictError(
                f"Order {order.order_number} can no longer be cancelled",
                code="ORDER_NOT_CANCELLABLE",
                details={"status": order.status.value}
            )

        order = self.update_status(order_id, OrderStatus.CANCELLED, cancelled_by, reason)
        logger.info("order_cancelled", order_id=order_id, by_admin=by_admin)
        return order

    # ===================
    # UTILITY METHODS
    # ===================

    def stats(self) -> OrderStats:
        """Counters for the admin dashboard; "today" starts at 00:00 UTC."""
        orders = self.get_all()
        start_of_day = self.clock().replace(hour=0, minute=0, second=0, microsecond=0)
        today = [o for o in orders if o.created_at and o.created_at >= start_of_day]

        return OrderStats(
            today_orders=len(today),
            pending_confirmation=sum(1 for o in orders if o.status == OrderStatus.PENDING_CONFIRMATION),
            processing=sum(1 for o in orders if o.status == OrderStatus.PROCESSING),
            out_for_delivery=sum(1 for o in orders if o.status == OrderStatus.OUT_FOR_DELIVERY),
            today_revenue=sum(o.total for o in today),
            total_orders=len(orders),
        )


# Singleton instance for convenience
_order_service: Optional[OrderService] = None

def get_order_service() -> OrderService:
    """Get or create OrderService instance."""
    global _order_service
    if _order_service is None:
        _order_service = OrderService()
    return _order_service
