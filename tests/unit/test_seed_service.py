"""
Unit tests for ProductSeeder.

Run: pytest tests/unit/test_seed_service.py -v
"""

import io
import math
import pytest
from datetime import datetime, timedelta, timezone

from services.seed_service import (
    ConsoleSeedReporter,
    MAX_BATCH_OPERATIONS,
    ProductSeeder,
    SeedResult,
    count_by_category,
    format_price_info,
)
from services.document_store import InMemoryDocumentStore, SupabaseDocumentStore
from models.product import Category, Product, Variant
from exceptions import BatchCommitError, ValidationError

from tests.factories import ProductFactory


FIXED_NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


class RecordingReporter:
    """Collects reporter events in order."""

    def __init__(self):
        self.events = []

    def seeding_started(self, total):
        self.events.append(("started", total))

    def product_queued(self, product):
        self.events.append(("queued", product.id))

    def batch_committing(self, batch_number, operations, final):
        self.events.append(("committing", batch_number, operations, final))

    def batch_committed(self, batch_number, final):
        self.events.append(("committed", batch_number, final))

    def seeding_completed(self, result):
        self.events.append(("completed", result.total_products))

    def seeding_failed(self, error):
        self.events.append(("failed", type(error).__name__))


@pytest.fixture
def store():
    return InMemoryDocumentStore(clock=lambda: FIXED_NOW)


class TestProductSeederBatching:
    """Batch boundaries and commit counts."""

    @pytest.mark.parametrize("total,ceiling", [(1, 3), (3, 3), (4, 3), (7, 3), (9, 3), (10, 4)])
    def test_commit_count_is_ceiling_of_total_over_batch_size(self, store, total, ceiling):
        """Should commit ceil(L / C) batches."""
        products = ProductFactory.build_batch(total)
        seeder = ProductSeeder(store, max_batch_operations=ceiling)

        result = seeder.seed(products)

        assert result.batches_committed == math.ceil(total / ceiling)
        assert len(store.commits) == math.ceil(total / ceiling)

    def test_every_batch_but_last_is_full(self, store):
        """Should fill batches to the ceiling and put the remainder last."""
        products = ProductFactory.build_batch(7)

        ProductSeeder(store, max_batch_operations=3).seed(products)

        assert [len(keys) for keys in store.commits] == [3, 3, 1]

    def test_exact_multiple_has_no_trailing_commit(self, store):
        """Should not commit an empty final batch when L is a multiple of C."""
        products = ProductFactory.build_batch(6)

        result = ProductSeeder(store, max_batch_operations=3).seed(products)

        assert result.batches_committed == 2
        assert [len(keys) for keys in store.commits] == [3, 3]

    def test_writes_in_input_order(self, store):
        """Should queue products in the order given."""
        products = ProductFactory.build_batch(5)

        ProductSeeder(store, max_batch_operations=2).seed(products)

        committed = [key for keys in store.commits for key in keys]
        assert committed == [p.id for p in products]

    def test_empty_input_commits_nothing(self, store):
        """Should make no commit and report zero totals for an empty list."""
        result = ProductSeeder(store).seed([])

        assert result == SeedResult()
        assert store.commits == []

    def test_default_ceiling_boundary(self, store):
        """A list exactly at the ceiling is one batch; one more makes two."""
        products = ProductFactory.build_batch(MAX_BATCH_OPERATIONS + 1)

        at_ceiling = ProductSeeder(store).seed(products[:MAX_BATCH_OPERATIONS])
        assert at_ceiling.batches_committed == 1

        over_ceiling = ProductSeeder(InMemoryDocumentStore()).seed(products)
        assert over_ceiling.batches_committed == 2

    @pytest.mark.parametrize("size", [0, -5, MAX_BATCH_OPERATIONS + 1])
    def test_rejects_batch_size_outside_store_ceiling(self, store, size):
        """Should refuse ceilings below 1 or above the store's per-commit limit."""
        with pytest.raises(ValidationError) as exc_info:
            ProductSeeder(store, max_batch_operations=size)

        assert exc_info.value.code == "INVALID_BATCH_SIZE"


class TestProductSeederDocuments:
    """What ends up in the store."""

    def test_document_holds_product_fields_and_timestamps(self, store):
        """Should write the product fields plus server-stamped timestamps."""
        product = ProductFactory.build(id="baby-feeder", variant_count=2)

        ProductSeeder(store).seed([product])

        document = store.get("products", "baby-feeder")
        assert document["name"] == product.name
        assert document["category"] == "Feeders"
        assert len(document["variants"]) == 2
        assert document["created_at"] == FIXED_NOW
        assert document["updated_at"] == FIXED_NOW

    def test_rerun_overwrites_instead_of_duplicating(self, store):
        """Should leave one document per id after seeding twice."""
        products = ProductFactory.build_batch(4)
        seeder = ProductSeeder(store, max_batch_operations=3)

        seeder.seed(products)
        seeder.seed(products)

        assert sorted(store.keys("products")) == sorted(p.id for p in products)

    def test_rerun_replaces_whole_document(self, store):
        """Should replace, not merge, an existing document."""
        store.collections["products"] = {"p1": {"id": "p1", "legacy_field": True}}
        product = ProductFactory.build(id="p1")

        ProductSeeder(store).seed([product])

        assert "legacy_field" not in store.get("products", "p1")

    def test_rerun_keeps_fields_and_bumps_updated_at(self):
        """A second run leaves business fields as they were and restamps updated_at."""
        ticks = iter([FIXED_NOW, FIXED_NOW + timedelta(minutes=5)])
        store = InMemoryDocumentStore(clock=lambda: next(ticks))
        products = ProductFactory.build_batch(3)
        seeder = ProductSeeder(store)

        seeder.seed(products)
        first = {p.id: store.get("products", p.id) for p in products}
        seeder.seed(products)
        second = {p.id: store.get("products", p.id) for p in products}

        for product_id, before in first.items():
            after = second[product_id]
            assert after.keys() == before.keys()
            assert after["updated_at"] > before["updated_at"]
            for key in before.keys() - {"created_at", "updated_at"}:
                assert after[key] == before[key]

    def test_reseed_restores_soft_deleted_product(self, store):
        """Should clear deleted_at along with setting is_active."""
        store.collections["products"] = {
            "p1": {"id": "p1", "is_active": False, "deleted_at": FIXED_NOW}
        }

        ProductSeeder(store).seed([ProductFactory.build(id="p1")])

        document = store.get("products", "p1")
        assert document["is_active"] is True
        assert document["deleted_at"] is None

    def test_supabase_upsert_nulls_deleted_at(self, mock_supabase):
        """The upserted row names deleted_at so the conflict update clears it."""
        ProductSeeder(SupabaseDocumentStore(mock_supabase)).seed([ProductFactory.build(id="p1")])

        row = mock_supabase.writes("products", "upsert")[0][0]
        assert "deleted_at" in row
        assert row["deleted_at"] is None
        assert row["is_active"] is True

    def test_uses_configured_collection(self, store):
        """Should write into the collection it was given."""
        ProductSeeder(store, collection="catalog").seed(ProductFactory.build_batch(1))

        assert store.keys("products") == []
        assert len(store.keys("catalog")) == 1


class TestProductSeederFailure:
    """Commit failures."""

    def test_failure_keeps_earlier_batches(self):
        """Batches before the failing one stay written; later ones are never tried."""
        store = InMemoryDocumentStore(fail_on_commit=2)
        products = ProductFactory.build_batch(7)

        with pytest.raises(BatchCommitError) as exc_info:
            ProductSeeder(store, max_batch_operations=3).seed(products)

        assert exc_info.value.batch_number == 2
        assert exc_info.value.operations == 3
        assert len(store.commits) == 1
        assert store.keys("products") == [p.id for p in products[:3]]

    def test_failure_on_final_partial_batch(self):
        """Should report the final batch number when the remainder fails."""
        store = InMemoryDocumentStore(fail_on_commit=3)
        products = ProductFactory.build_batch(7)

        with pytest.raises(BatchCommitError) as exc_info:
            ProductSeeder(store, max_batch_operations=3).seed(products)

        assert exc_info.value.batch_number == 3
        assert exc_info.value.operations == 1
        assert len(store.keys("products")) == 6

    def test_failure_on_first_batch_writes_nothing(self):
        """Should leave the store untouched when batch 1 fails."""
        store = InMemoryDocumentStore(fail_on_commit=1)

        with pytest.raises(BatchCommitError):
            ProductSeeder(store).seed(ProductFactory.build_batch(2))

        assert store.keys("products") == []

    def test_failure_is_reported_and_not_completed(self):
        """Should emit seeding_failed and never seeding_completed."""
        store = InMemoryDocumentStore(fail_on_commit=1)
        reporter = RecordingReporter()

        with pytest.raises(BatchCommitError):
            ProductSeeder(store, reporter=reporter).seed(ProductFactory.build_batch(1))

        assert reporter.events[-1] == ("failed", "BatchCommitError")
        assert not any(event[0] == "completed" for event in reporter.events)

    def test_error_carries_cause(self):
        """Should keep the store error as the cause."""
        store = InMemoryDocumentStore(fail_on_commit=1)

        with pytest.raises(BatchCommitError) as exc_info:
            ProductSeeder(store).seed(ProductFactory.build_batch(1))

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert exc_info.value.to_dict()["error"]["code"] == "BATCH_COMMIT_FAILED"


class TestProductSeederTotals:
    """Reported totals."""

    def test_totals_come_from_input(self, store):
        """Two products with 3 and 1 variants: 4 variants, 1 batch."""
        products = [
            ProductFactory.build(variant_count=3),
            ProductFactory.build(variant_count=1, category=Category.DRINKERS),
        ]

        result = ProductSeeder(store).seed(products)

        assert result.total_products == 2
        assert result.total_variants == 4
        assert result.batches_committed == 1
        assert result.category_counts == {"Feeders": 1, "Drinkers": 1}

    def test_product_without_variants_counts_zero(self, store):
        """Should accept an empty variant list."""
        result = ProductSeeder(store).seed([ProductFactory.build(variant_count=0)])

        assert result.total_products == 1
        assert result.total_variants == 0

    def test_reporter_event_order(self, store):
        """Should announce each product, then each commit, then completion."""
        reporter = RecordingReporter()
        products = ProductFactory.build_batch(3)

        ProductSeeder(store, reporter=reporter, max_batch_operations=2).seed(products)

        assert reporter.events == [
            ("started", 3),
            ("queued", products[0].id),
            ("queued", products[1].id),
            ("committing", 1, 2, False),
            ("committed", 1, False),
            ("queued", products[2].id),
            ("committing", 2, 1, True),
            ("committed", 2, True),
            ("completed", 3),
        ]


class TestCountByCategory:
    """Tests for count_by_category()"""

    def test_keeps_first_seen_order(self):
        products = [
            ProductFactory.build(category=Category.DRINKERS),
            ProductFactory.build(category=Category.FEEDERS),
            ProductFactory.build(category=Category.DRINKERS),
        ]

        counts = count_by_category(products)

        assert list(counts) == ["Drinkers", "Feeders"]
        assert counts["Drinkers"] == 2

    def test_empty(self):
        assert count_by_category([]) == {}


def _product(*variants):
    return Product(id="p", name="Thing", category=Category.FEEDERS, variants=variants)


def _variant(id, retail, wholesale):
    return Variant(id=id, name=id, sku=id.upper(), retail_price=retail, wholesale_price=wholesale)


class TestFormatPriceInfo:
    """Tests for format_price_info()"""

    def test_no_variants(self):
        assert format_price_info(_product()) == "No price"

    def test_single_variant_shows_both_tiers(self):
        assert format_price_info(_product(_variant("a", 120, 100))) == "RP: 120 | WP: 100"

    def test_many_variants_show_lowest_retail(self):
        product = _product(_variant("a", 500, 450), _variant("b", 350, 300))

        assert format_price_info(product) == "2 variants (from 350)"


class TestConsoleSeedReporter:
    """Console output."""

    def test_success_output(self, store):
        """Should print progress lines and the summary block."""
        stream = io.StringIO()
        products = [
            ProductFactory.build(variant_count=1),
            ProductFactory.build(variant_count=2, category=Category.CHICKENS),
        ]

        ProductSeeder(store, reporter=ConsoleSeedReporter(stream)).seed(products)

        output = stream.getvalue()
        assert "Total products to seed: 2" in output
        assert f"   ✓ {products[0].name} (RP: 120 | WP: 100)" in output
        assert "Committing final batch 1 (2 operations)..." in output
        assert "✓ Final batch 1 committed successfully" in output
        assert "SEEDING COMPLETE!" in output
        assert "Total products seeded: 2" in output
        assert "Total variants: 3" in output
        assert "Total batches committed: 1" in output
        assert "   - Chickens: 1 products" in output
        assert "Next steps:" in output

    def test_intermediate_batch_label(self, store):
        """Should label full batches without 'final'."""
        stream = io.StringIO()

        ProductSeeder(
            store, reporter=ConsoleSeedReporter(stream), max_batch_operations=1
        ).seed(ProductFactory.build_batch(2))

        output = stream.getvalue()
        assert "Committing batch 1 (1 operations)..." in output
        assert "✓ Batch 1 committed successfully" in output
        assert "Committing batch 2 (1 operations)..." in output
        assert "Final batch" not in output

    def test_failure_output(self):
        """Should print the error and troubleshooting hints."""
        stream = io.StringIO()
        store = InMemoryDocumentStore(fail_on_commit=1)

        with pytest.raises(BatchCommitError):
            ProductSeeder(store, reporter=ConsoleSeedReporter(stream)).seed(
                ProductFactory.build_batch(1)
            )

        output = stream.getvalue()
        assert "✗ Error seeding products: Committing batch 1 failed" in output
        assert "Troubleshooting:" in output
        assert "SEEDING COMPLETE!" not in output
