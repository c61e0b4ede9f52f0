"""
Business logic services.

Each service handles one domain area.
"""

from services.document_store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    WriteBatch,
    SupabaseDocumentStore,
    InMemoryDocumentStore,
)
from services.seed_service import (
    MAX_BATCH_OPERATIONS,
    ProductSeeder,
    SeedResult,
    ConsoleSeedReporter,
)
from services.product_service import ProductService, get_product_service
from services.auth_service import AuthService
from services.cart_service import CartService, get_cart_service
from services.order_service import OrderService, get_order_service

__all__ = [
    "SERVER_TIMESTAMP",
    "DocumentStore",
    "WriteBatch",
    "SupabaseDocumentStore",
    "InMemoryDocumentStore",
    "MAX_BATCH_OPERATIONS",
    "ProductSeeder",
    "SeedResult",
    "ConsoleSeedReporter",
    "ProductService",
    "get_product_service",
    "AuthService",
    "CartService",
    "get_cart_service",
    "OrderService",
    "get_order_service",
]
