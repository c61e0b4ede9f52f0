"""
Unit tests for ProductService.

Run: pytest tests/unit/test_product_service.py -v
Run with coverage: pytest tests/unit/test_product_service.py --cov=services/product_service
"""

import pytest

# Import what we're testing
from services.product_service import ProductService, get_product_service
from models.product import Category, ProductUpdate, StockAdjustment
from exceptions import (
    DatabaseError,
    ProductNotFoundError,
    ValidationError,
    VariantNotFoundError,
)

# Import test utilities
from tests.factories import ProductFactory


class TestProductServiceGetAll:
    """Tests for ProductService.get_all()"""

    def test_get_all_returns_products(self, mock_db, mock_supabase, sample_products_list):
        """Should return list of products."""
        # Arrange
        mock_supabase.set_table_data("products", sample_products_list)
        service = ProductService()

        # Act
        products = service.get_all()

        # Assert
        assert len(products) == 3
        assert products[0].id == "baby-feeder"
        assert products[2].variant_count == 2

    def test_get_all_empty_returns_empty_list(self, mock_db, mock_supabase):
        """Should return empty list when no products exist."""
        mock_supabase.set_table_data("products", [])
        service = ProductService()

        assert service.get_all() == []

    def test_get_all_with_category_filter(self, mock_db, mock_supabase):
        """Should parse the category of filtered rows."""
        mock_supabase.set_table_data("products", [ProductFactory.create(category="Drinkers")])
        service = ProductService()

        products = service.get_all(category=Category.DRINKERS)

        assert products[0].category == Category.DRINKERS

    def test_get_all_database_error(self, mock_db, mock_supabase):
        """Should wrap store errors as DatabaseError."""
        mock_supabase.fail("products", "select", RuntimeError("timeout"))
        service = ProductService()

        with pytest.raises(DatabaseError):
            service.get_all()


class TestProductServiceGetById:
    """Tests for ProductService.get_by_id()"""

    def test_get_by_id_returns_product(self, mock_db, mock_supabase, sample_product_data):
        mock_supabase.set_table_data("products", [sample_product_data])
        service = ProductService()

        product = service.get_by_id("baby-feeder")

        assert product.name == "Baby Feeder"
        assert product.variants[0].sku == "FEED-BABY"

    def test_get_by_id_not_found(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("products", [])
        service = ProductService()

        with pytest.raises(ProductNotFoundError) as exc_info:
            service.get_by_id("missing")

        assert exc_info.value.status_code == 404


class TestProductServiceUpdate:
    """Tests for update, activation and soft delete."""

    def test_update_writes_only_given_fields(self, mock_db, mock_supabase, sample_product_data):
        mock_supabase.set_table_data("products", [sample_product_data])
        service = ProductService()

        product = service.update("baby-feeder", ProductUpdate(description="Now in blue"))

        written = mock_supabase.writes("products", "update")[0]
        assert set(written) == {"description", "updated_at"}
        assert written["updated_at"] == "now"
        assert product.description == "Now in blue"

    def test_update_with_nothing_set_skips_write(self, mock_db, mock_supabase, sample_product_data):
        mock_supabase.set_table_data("products", [sample_product_data])
        service = ProductService()

        product = service.update("baby-feeder", ProductUpdate())

        assert product.id == "baby-feeder"
        assert mock_supabase.writes("products", "update") == []

    def test_update_not_found(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("products", [])
        service = ProductService()

        with pytest.raises(ProductNotFoundError):
            service.update("missing", ProductUpdate(name="X"))

    def test_deactivate(self, mock_db, mock_supabase, sample_product_data):
        mock_supabase.set_table_data("products", [sample_product_data])
        service = ProductService()

        product = service.set_active("baby-feeder", False)

        assert product.is_active is False

    def test_delete_is_soft(self, mock_db, mock_supabase, sample_product_data):
        """Should deactivate and stamp deleted_at instead of removing the row."""
        mock_supabase.set_table_data("products", [sample_product_data])
        service = ProductService()

        assert service.delete("baby-feeder") is True

        written = mock_supabase.writes("products", "update")[0]
        assert written["is_active"] is False
        assert written["deleted_at"] == "now"


class TestProductServiceAdjustStock:
    """Tests for ProductService.adjust_stock()"""

    def test_adjust_stock_sets_quantity(self, mock_db, mock_supabase, sample_product_data):
        mock_supabase.set_table_data("products", [sample_product_data])
        service = ProductService()

        product = service.adjust_stock(
            "baby-feeder",
            StockAdjustment(variant_id="default", quantity=0, reason="Damaged"),
            updated_by="admin-1"
        )

        variant = product.variants[0]
        assert variant.stock_quantity == 0
        assert variant.in_stock is False
        written = mock_supabase.writes("products", "update")[0]["variants"][0]
        assert written["last_stock_update_by"] == "admin-1"
        assert written["last_stock_update"]

    def test_adjust_stock_logs_movement(self, mock_db, mock_supabase, sample_product_data):
        mock_supabase.set_table_data("products", [sample_product_data])
        service = ProductService()

        service.adjust_stock(
            "baby-feeder",
            StockAdjustment(variant_id="default", quantity=250, reason="  Recount  ")
        )

        movement = mock_supabase.writes("stock_movements", "insert")[0][0]
        assert movement["previous_quantity"] == 300
        assert movement["new_quantity"] == 250
        assert movement["difference"] == -50
        assert movement["reason"] == "Recount"
        assert movement["sku"] == "FEED-BABY"

    def test_movement_log_failure_keeps_adjustment(self, mock_db, mock_supabase, sample_product_data):
        """Should not fail the adjustment when the audit insert fails."""
        mock_supabase.set_table_data("products", [sample_product_data])
        mock_supabase.fail("stock_movements", "insert", RuntimeError("rls"))
        service = ProductService()

        product = service.adjust_stock(
            "baby-feeder",
            StockAdjustment(variant_id="default", quantity=5, reason="Recount")
        )

        assert product.variants[0].stock_quantity == 5

    def test_unknown_variant(self, mock_db, mock_supabase, sample_product_data):
        mock_supabase.set_table_data("products", [sample_product_data])
        service = ProductService()

        with pytest.raises(VariantNotFoundError) as exc_info:
            service.adjust_stock(
                "baby-feeder",
                StockAdjustment(variant_id="xl", quantity=5, reason="Recount")
            )

        assert exc_info.value.details["product_id"] == "baby-feeder"

    def test_unchanged_quantity_rejected(self, mock_db, mock_supabase, sample_product_data):
        mock_supabase.set_table_data("products", [sample_product_data])
        service = ProductService()

        with pytest.raises(ValidationError) as exc_info:
            service.adjust_stock(
                "baby-feeder",
                StockAdjustment(variant_id="default", quantity=300, reason="Recount")
            )

        assert exc_info.value.code == "STOCK_UNCHANGED"
        assert mock_supabase.writes("products", "update") == []

    def test_blank_reason_rejected(self):
        with pytest.raises(Exception):
            StockAdjustment(variant_id="default", quantity=5, reason="   ")


class TestProductServiceReports:
    """Inventory report and counts."""

    def test_inventory_report_flags(self, mock_db, mock_supabase, sample_products_list):
        mock_supabase.set_table_data("products", sample_products_list)
        service = ProductService()

        report = service.inventory_report()

        assert report.total_variants == 4
        assert report.out_of_stock_count == 1
        assert report.low_stock_count == 2
        day_old = next(i for i in report.items if i.variant_id == "day-old")
        assert day_old.is_out_of_stock and day_old.is_low_stock

    def test_count_by_category(self, mock_db, mock_supabase, sample_products_list):
        mock_supabase.set_table_data("products", sample_products_list)
        service = ProductService()

        counts = service.count_by_category()

        assert counts == {"Feeders": 1, "Drinkers": 1, "Chickens": 1}


class TestGetProductService:
    """Tests for the module-level accessor."""

    def test_returns_singleton(self, mock_db):
        import services.product_service as module
        module._product_service = None

        assert get_product_service() is get_product_service()

        module._product_service = None
