"""
Seed the products table with the static catalog.

Usage:
    python -m scripts.seed_products
    python -m scripts.seed_products --dry-run
    python -m scripts.seed_products --batch-size 100

Requires SUPABASE_URL and SUPABASE_KEY (environment or .env) unless
--dry-run is given. SUPABASE_SERVICE_KEY is used when present.
Exits 0 on success, 1 on missing configuration or a failed commit.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

# Add project root to path so the script also runs as a plain file
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import structlog

from config import settings, configure_logging, get_supabase_client, get_admin_client
from exceptions import AppError
from models.product import Product
from services.document_store import (
    DocumentStore,
    InMemoryDocumentStore,
    SupabaseDocumentStore,
)
from services.seed_service import ConsoleSeedReporter, ProductSeeder
from scripts.product_catalog import PRODUCTS

logger = structlog.get_logger(__name__)


def build_store(dry_run: bool) -> DocumentStore:
    """Supabase-backed store, or an in-memory one for dry runs."""
    if dry_run:
        return InMemoryDocumentStore()
    client = get_admin_client() or get_supabase_client()
    return SupabaseDocumentStore(client)


def seed_products(
    products: Sequence[Product] = PRODUCTS,
    dry_run: bool = False,
    batch_size: Optional[int] = None,
    stream: Optional[TextIO] = None
) -> int:
    """
    Run the seeding and return the process exit status.

    Nothing touches the store until the configuration check passes.
    """
    out = stream or sys.stdout
    reporter = ConsoleSeedReporter(out)

    if not dry_run and not settings.store_configured:
        missing = settings.missing_store_fields
        logger.error("seed_configuration_missing", missing=missing)
        print("Error: Supabase configuration missing!", file=out)
        print(f"Missing: {', '.join(missing)}", file=out)
        print("Please create a .env file with your Supabase credentials.", file=out)
        return 1

    try:
        store = build_store(dry_run)
        if dry_run:
            print("Dry run: writing to an in-memory store", file=out)
        else:
            print("✓ Supabase client initialized", file=out)
            print(f"Project: {settings.supabase_url}", file=out)
        print(file=out)

        seeder = ProductSeeder(
            store,
            reporter=reporter,
            max_batch_operations=settings.seed_batch_size if batch_size is None else batch_size,
            collection=settings.products_table,
        )
        seeder.seed(products)

    except AppError as e:
        # Commit failures are already reported by the seeder
        if e.code != "BATCH_COMMIT_FAILED":
            reporter.seeding_failed(e)
        return 1

    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Upsert the product catalog into the products table in batches."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Seed an in-memory store instead of Supabase (no credentials needed)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help=f"Writes per committed batch (default: {settings.seed_batch_size})",
    )
    args = parser.parse_args(argv)

    configure_logging()

    print("Initializing seed script...")
    print()
    sys.exit(seed_products(dry_run=args.dry_run, batch_size=args.batch_size))


if __name__ == "__main__":
    main()
