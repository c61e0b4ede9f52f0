"""
Product API routes.

Public catalog reads plus the admin-only operations: inventory, edit,
activate/deactivate, soft delete and stock adjustment.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.product import (
    Category,
    InventoryReport,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    StockAdjustment,
)
from models.user import UserProfile
from services.product_service import get_product_service
from routes.dependencies import require_admin
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("", response_model=ProductListResponse)
async def list_products(
    category: Optional[Category] = Query(None, description="Filter by category"),
    include_inactive: bool = Query(False, description="Include inactive products")
):
    """List products, ordered by category then name."""
    try:
        service = get_product_service()
        products = service.get_all(
            category=category,
            active_only=not include_inactive
        )
        return ProductListResponse(data=products, total=len(products))

    except Exception as e:
        return handle_error(e)


@router.get("/inventory", response_model=InventoryReport)
async def inventory_report(
    category: Optional[Category] = Query(None, description="Filter by category"),
    admin: UserProfile = Depends(require_admin)
):
    """Per-variant stock levels with low-stock and out-of-stock flags."""
    try:
        service = get_product_service()
        return service.inventory_report(category=category)

    except Exception as e:
        return handle_error(e)


@router.get("/count/by-category")
async def count_by_category(
    include_inactive: bool = Query(False, description="Include inactive")
):
    """Product count per category."""
    try:
        service = get_product_service()
        return {"counts": service.count_by_category(active_only=not include_inactive)}

    except Exception as e:
        return handle_error(e)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str):
    """
    Get a single product by ID.

    Raises:
        404: Product not found
    """
    try:
        service = get_product_service()
        return service.get_by_id(product_id)

    except Exception as e:
        return handle_error(e)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    admin: UserProfile = Depends(require_admin)
):
    """
    Update an existing product.

    Only provided fields are updated.

    Raises:
        404: Product not found
        422: Validation error
    """
    try:
        service = get_product_service()
        return service.update(product_id, data)

    except Exception as e:
        return handle_error(e)


@router.post("/{product_id}/activate", response_model=ProductResponse)
async def activate_product(
    product_id: str,
    admin: UserProfile = Depends(require_admin)
):
    """Mark a product active."""
    try:
        service = get_product_service()
        return service.set_active(product_id, True)

    except Exception as e:
        return handle_error(e)


@router.post("/{product_id}/deactivate", response_model=ProductResponse)
async def deactivate_product(
    product_id: str,
    admin: UserProfile = Depends(require_admin)
):
    """Mark a product inactive."""
    try:
        service = get_product_service()
        return service.set_active(product_id, False)

    except Exception as e:
        return handle_error(e)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: str,
    admin: UserProfile = Depends(require_admin)
):
    """
    Delete a product (soft delete).

    Sets is_active=False and stamps deleted_at.

    Raises:
        404: Product not found
    """
    try:
        service = get_product_service()
        service.delete(product_id)
        return None  # 204 No Content

    except Exception as e:
        return handle_error(e)


@router.post("/{product_id}/stock", response_model=ProductResponse)
async def adjust_stock(
    product_id: str,
    data: StockAdjustment,
    admin: UserProfile = Depends(require_admin)
):
    """
    Set a variant's stock quantity.

    Raises:
        404: Product or variant not found
        422: Quantity unchanged or reason missing
    """
    try:
        service = get_product_service()
        return service.adjust_stock(product_id, data, updated_by=admin.uid)

    except Exception as e:
        return handle_error(e)
