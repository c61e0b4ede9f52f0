"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.products import router as products_router
from routes.auth import router as auth_router
from routes.orders import router as orders_router
from routes.cart import router as cart_router

__all__ = [
    "products_router",
    "auth_router",
    "orders_router",
    "cart_router",
]
