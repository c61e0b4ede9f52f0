"""
Bulk upsert of catalog products into the document store.

Products are written in input order, one keyed upsert each, grouped into
batches of at most `max_batch_operations`. A full batch is committed
before the next product is queued; a final partial batch is committed
at the end. Any commit failure stops the run. Earlier batches stay
written, later ones are never attempted.
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence, TextIO
import sys
import structlog

from models.product import Product
from services.document_store import DocumentStore, WriteBatch, SERVER_TIMESTAMP
from exceptions import BatchCommitError, ValidationError

logger = structlog.get_logger(__name__)

# Per-commit write ceiling of the backing store
MAX_BATCH_OPERATIONS = 500

# Columns written by admin tooling, not by the catalog. An upsert only
# sets the columns it is given, so a full overwrite sends these as null.
CLEARED_COLUMNS = ("deleted_at",)


@dataclass
class SeedResult:
    """
    Totals for a seeding run.

    Counts come from the input list, not from reading the store back,
    so they describe what was attempted.
    """

    total_products: int = 0
    total_variants: int = 0
    batches_committed: int = 0
    category_counts: dict[str, int] = field(default_factory=dict)


class SeedReporter(Protocol):
    """Receives progress events from ProductSeeder."""

    def seeding_started(self, total: int) -> None: ...

    def product_queued(self, product: Product) -> None: ...

    def batch_committing(self, batch_number: int, operations: int, final: bool) -> None: ...

    def batch_committed(self, batch_number: int, final: bool) -> None: ...

    def seeding_completed(self, result: SeedResult) -> None: ...

    def seeding_failed(self, error: Exception) -> None: ...


class SilentSeedReporter:
    """Reporter that ignores every event."""

    def seeding_started(self, total: int) -> None:
        pass

    def product_queued(self, product: Product) -> None:
        pass

    def batch_committing(self, batch_number: int, operations: int, final: bool) -> None:
        pass

    def batch_committed(self, batch_number: int, final: bool) -> None:
        pass

    def seeding_completed(self, result: SeedResult) -> None:
        pass

    def seeding_failed(self, error: Exception) -> None:
        pass


def format_price_info(product: Product) -> str:
    """Short price label for the progress line."""
    if not product.variants:
        return "No price"
    if len(product.variants) == 1:
        variant = product.variants[0]
        return f"RP: {variant.retail_price:g} | WP: {variant.wholesale_price:g}"
    lowest = min(v.retail_price for v in product.variants)
    return f"{len(product.variants)} variants (from {lowest:g})"


class ConsoleSeedReporter:
    """
    Human-readable progress on a text stream, plus structured log events.

    The console lines are for people watching the run; nothing parses
    them.
    """

    TROUBLESHOOTING = (
        "Check SUPABASE_URL and SUPABASE_KEY in the .env file",
        "Verify row-level security policies allow writes to the products table",
        "Ensure the internet connection is stable",
        "Check the Supabase dashboard logs for error details",
    )

    NEXT_STEPS = (
        "View products in the Supabase table editor",
        "Test GET /api/products",
        "Upload product images to the storage bucket",
        "Review row-level security policies for production",
        "Manually assign the admin role to the first user",
    )

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _print(self, line: str = "") -> None:
        print(line, file=self.stream)

    def seeding_started(self, total: int) -> None:
        logger.info("seeding_started", total=total)
        self._print("Starting product seeding...")
        self._print(f"Total products to seed: {total}")
        self._print()

    def product_queued(self, product: Product) -> None:
        logger.debug("product_queued", product_id=product.id)
        self._print(f"   ✓ {product.name} ({format_price_info(product)})")

    def batch_committing(self, batch_number: int, operations: int, final: bool) -> None:
        label = "final batch" if final else "batch"
        self._print()
        self._print(f"Committing {label} {batch_number} ({operations} operations)...")

    def batch_committed(self, batch_number: int, final: bool) -> None:
        logger.info("batch_committed", batch_number=batch_number, final=final)
        label = "Final batch" if final else "Batch"
        self._print(f"✓ {label} {batch_number} committed successfully")
        self._print()

    def seeding_completed(self, result: SeedResult) -> None:
        logger.info(
            "seeding_completed",
            products=result.total_products,
            variants=result.total_variants,
            batches=result.batches_committed
        )
        self._print("=" * 60)
        self._print("SEEDING COMPLETE!")
        self._print("=" * 60)
        self._print(f"Total products seeded: {result.total_products}")
        self._print(f"Total variants: {result.total_variants}")
        self._print(f"Total batches committed: {result.batches_committed}")
        self._print()
        self._print("Products by category:")
        for category, count in result.category_counts.items():
            self._print(f"   - {category}: {count} products")
        self._print()
        self._print("Next steps:")
        for number, step in enumerate(self.NEXT_STEPS, start=1):
            self._print(f"   {number}. {step}")
        self._print()

    def seeding_failed(self, error: Exception) -> None:
        logger.error("seeding_failed", error=str(error), error_type=type(error).__name__)
        self._print()
        self._print(f"✗ Error seeding products: {error}")
        self._print()
        self._print("Troubleshooting:")
        for number, hint in enumerate(self.TROUBLESHOOTING, start=1):
            self._print(f"   {number}. {hint}")
        self._print()


class ProductSeeder:
    """
    Upserts a fixed, ordered list of products in bounded batches.

    Single-threaded: each commit blocks before more writes are queued.
    """

    def __init__(
        self,
        store: DocumentStore,
        reporter: Optional[SeedReporter] = None,
        max_batch_operations: int = MAX_BATCH_OPERATIONS,
        collection: str = "products"
    ):
        if not 1 <= max_batch_operations <= MAX_BATCH_OPERATIONS:
            raise ValidationError(
                f"Batch size must be between 1 and {MAX_BATCH_OPERATIONS}",
                code="INVALID_BATCH_SIZE",
                details={"max_batch_operations": max_batch_operations}
            )
        self.store = store
        self.reporter = reporter or SilentSeedReporter()
        self.max_batch_operations = max_batch_operations
        self.collection = collection

    def seed(self, products: Sequence[Product]) -> SeedResult:
        """
        Write every product and return the attempted totals.

        Raises:
            BatchCommitError: A commit failed; the run stops there.
        """
        self.reporter.seeding_started(len(products))

        result = SeedResult()
        batch = self.store.batch()
        operation_count = 0
        batch_number = 1

        for product in products:
            data = product.to_document()
            data["created_at"] = SERVER_TIMESTAMP
            data["updated_at"] = SERVER_TIMESTAMP
            data.update(dict.fromkeys(CLEARED_COLUMNS))

            batch.set(self.collection, product.id, data)
            operation_count += 1
            result.total_products += 1
            self.reporter.product_queued(product)

            # Strict equality: a full batch goes out before the next write
            if operation_count == self.max_batch_operations:
                self._commit(batch, batch_number, operation_count, final=False)
                result.batches_committed += 1

                batch = self.store.batch()
                operation_count = 0
                batch_number += 1

        if operation_count > 0:
            self._commit(batch, batch_number, operation_count, final=True)
            result.batches_committed += 1

        result.total_variants = sum(p.variant_count for p in products)
        result.category_counts = count_by_category(products)

        self.reporter.seeding_completed(result)
        return result

    def _commit(
        self,
        batch: WriteBatch,
        batch_number: int,
        operations: int,
        final: bool
    ) -> None:
        self.reporter.batch_committing(batch_number, operations, final)
        try:
            batch.commit()
        except Exception as e:
            logger.error(
                "seed_commit_failed",
                batch_number=batch_number,
                operations=operations,
                error=str(e),
                error_type=type(e).__name__
            )
            error = BatchCommitError(batch_number, operations, str(e))
            self.reporter.seeding_failed(error)
            raise error from e
        self.reporter.batch_committed(batch_number, final)


def count_by_category(products: Sequence[Product]) -> dict[str, int]:
    """Products per category, in first-seen order."""
    counts: dict[str, int] = {}
    for product in products:
        category = product.category.value
        counts[category] = counts.get(category, 0) + 1
    return counts
