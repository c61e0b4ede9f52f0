"""
Product service for catalog administration.

Products live as one row per document in the products table, with the
variants kept as an ordered JSON list on the row.
"""

from typing import Any, Optional
from datetime import datetime, timezone
import structlog

from config import get_supabase_client, settings
from models.product import (
    Category,
    InventoryItem,
    InventoryReport,
    ProductResponse,
    ProductUpdate,
    StockAdjustment,
    StockMovement,
)
from services.document_store import SERVER_TIMESTAMP, encode_fields
from exceptions import (
    ProductNotFoundError,
    VariantNotFoundError,
    ValidationError,
    DatabaseError
)

logger = structlog.get_logger(__name__)


class ProductService:
    """
    Product business logic.

    Handles reads, partial updates, activation, soft delete and stock
    adjustments for products.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = settings.products_table
        self.movements_table = settings.stock_movements_table

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(
        self,
        category: Optional[Category] = None,
        active_only: bool = True
    ) -> list[ProductResponse]:
        """
        Get all products with optional filters.

        Args:
            category: Filter by category
            active_only: Only return active products

        Returns:
            Products ordered by category, then name
        """
        logger.info(
            "getting_products",
            category=category,
            active_only=active_only
        )

        try:
            query = self.db.table(self.table).select("*")

            if active_only:
                query = query.eq("is_active", True)
            if category:
                query = query.eq("category", category.value)

            query = query.order("category").order("name")

            result = query.execute()

            products = [ProductResponse(**row) for row in result.data]

            logger.info("products_retrieved", count=len(products))

            return products

        except Exception as e:
            logger.error(
                "get_products_failed",
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    def _get_row(self, product_id: str) -> dict[str, Any]:
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", product_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(
                "get_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

        if not result.data:
            raise ProductNotFoundError(product_id)

        return result.data[0]

    def get_by_id(self, product_id: str) -> ProductResponse:
        """
        Get a single product by ID.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.debug("getting_product", product_id=product_id)
        return ProductResponse(**self._get_row(product_id))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def _write(self, product_id: str, fields: dict[str, Any], operation: str) -> ProductResponse:
        fields = {**fields, "updated_at": SERVER_TIMESTAMP}
        try:
            result = (
                self.db.table(self.table)
                .update(encode_fields(fields))
                .eq("id", product_id)
                .execute()
            )
        except Exception as e:
            logger.error(
                f"{operation}_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("update", str(e))

        if not result.data:
            raise ProductNotFoundError(product_id)

        return ProductResponse(**result.data[0])

    def update(self, product_id: str, data: ProductUpdate) -> ProductResponse:
        """
        Update an existing product.

        Only provided fields are written.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.info("updating_product", product_id=product_id)

        existing = self.get_by_id(product_id)

        update_data = data.to_fields()
        if not update_data:
            # Nothing to update, return existing
            return existing

        product = self._write(product_id, update_data, "update_product")

        logger.info(
            "product_updated",
            product_id=product_id,
            fields=list(update_data.keys())
        )

        return product

    def set_active(self, product_id: str, is_active: bool) -> ProductResponse:
        """Activate or deactivate a product."""
        action = "activate" if is_active else "deactivate"
        logger.info(f"{action}_product", product_id=product_id)

        self.get_by_id(product_id)
        product = self._write(product_id, {"is_active": is_active}, f"{action}_product")

        logger.info(f"product_{action}d", product_id=product_id)
        return product

    def delete(self, product_id: str) -> bool:
        """
        Soft delete a product (is_active=False, deleted_at stamped).

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.info("deleting_product", product_id=product_id)

        self.get_by_id(product_id)
        self._write(
            product_id,
            {"is_active": False, "deleted_at": SERVER_TIMESTAMP},
            "delete_product"
        )

        logger.info("product_deleted", product_id=product_id)
        return True

    # ===================
    # STOCK
    # ===================

    def adjust_stock(
        self,
        product_id: str,
        adjustment: StockAdjustment,
        updated_by: Optional[str] = None
    ) -> ProductResponse:
        """
        Set one variant's stock to an absolute quantity.

        `updated_by` is the acting admin's uid, taken from their session.

        The stock movement audit row is best-effort: if it fails the
        adjustment still stands.

        Raises:
            ProductNotFoundError: If product doesn't exist
            VariantNotFoundError: If the variant is not on the product
            ValidationError: If the quantity is unchanged
        """
        logger.info(
            "adjusting_stock",
            product_id=product_id,
            variant_id=adjustment.variant_id,
            quantity=adjustment.quantity
        )

        row = self._get_row(product_id)
        variants = [dict(v) for v in row.get("variants") or []]

        index = next(
            (i for i, v in enumerate(variants) if v.get("id") == adjustment.variant_id),
            None
        )
        if index is None:
            raise VariantNotFoundError(product_id, adjustment.variant_id)

        variant = variants[index]
        previous = variant.get("stock_quantity") or 0
        if adjustment.quantity == previous:
            raise ValidationError(
                "Stock quantity unchanged",
                code="STOCK_UNCHANGED",
                details={"quantity": previous}
            )

        variant["stock_quantity"] = adjustment.quantity
        variant["in_stock"] = adjustment.quantity > 0
        variant["last_stock_update"] = datetime.now(timezone.utc).isoformat()
        variant["last_stock_update_by"] = updated_by
        variants[index] = variant

        product = self._write(product_id, {"variants": variants}, "adjust_stock")

        movement = StockMovement(
            product_id=product_id,
            product_name=row.get("name", ""),
            variant_id=adjustment.variant_id,
            variant_name=variant.get("name", ""),
            sku=variant.get("sku", ""),
            previous_quantity=previous,
            new_quantity=adjustment.quantity,
            difference=adjustment.quantity - previous,
            reason=adjustment.reason.strip(),
            updated_by=updated_by,
        )
        self._log_movement(movement)

        logger.info(
            "stock_adjusted",
            product_id=product_id,
            variant_id=adjustment.variant_id,
            previous=previous,
            new=adjustment.quantity
        )

        return product

    def _log_movement(self, movement: StockMovement) -> None:
        try:
            self.db.table(self.movements_table).insert(
                encode_fields({**movement.model_dump(mode="json"), "created_at": SERVER_TIMESTAMP})
            ).execute()
        except Exception as e:
            # Audit trail only; the adjustment itself already succeeded
            logger.error(
                "stock_movement_log_failed",
                product_id=movement.product_id,
                variant_id=movement.variant_id,
                error=str(e)
            )

    def inventory_report(self, category: Optional[Category] = None) -> InventoryReport:
        """Every variant with its low-stock and out-of-stock flags."""
        products = self.get_all(category=category, active_only=False)

        items = []
        for product in products:
            for variant in product.variants:
                items.append(
                    InventoryItem(
                        product_id=product.id,
                        product_name=product.name,
                        category=product.category,
                        variant_id=variant.id,
                        variant_name=variant.name,
                        sku=variant.sku,
                        stock_quantity=variant.stock_quantity,
                        low_stock_threshold=variant.low_stock_threshold,
                        is_low_stock=variant.stock_quantity < variant.low_stock_threshold,
                        is_out_of_stock=variant.stock_quantity == 0,
                    )
                )

        return InventoryReport(
            items=items,
            total_variants=len(items),
            low_stock_count=sum(1 for i in items if i.is_low_stock),
            out_of_stock_count=sum(1 for i in items if i.is_out_of_stock),
        )

    # ===================
    # UTILITY METHODS
    # ===================

    def count_by_category(self, active_only: bool = True) -> dict[str, int]:
        """Count products per category."""
        try:
            query = self.db.table(self.table).select("category")
            if active_only:
                query = query.eq("is_active", True)
            result = query.execute()
        except Exception as e:
            logger.error("count_products_failed", error=str(e))
            raise DatabaseError("count", str(e))

        counts: dict[str, int] = {}
        for row in result.data:
            counts[row["category"]] = counts.get(row["category"], 0) + 1
        return counts


# Singleton instance for convenience
_product_service: Optional[ProductService] = None

def get_product_service() -> ProductService:
    """Get or create ProductService instance."""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service
