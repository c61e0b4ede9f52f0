"""
Cart API routes for the signed-in user.
"""

from fastapi import APIRouter, Depends
import structlog

from models.cart import Cart, CartItemRequest, CartMergeRequest, CartQuantityUpdate
from models.user import UserProfile
from services.cart_service import get_cart_service
from routes.dependencies import get_current_user
from routes.products import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=Cart)
async def get_cart(user: UserProfile = Depends(get_current_user)):
    try:
        return get_cart_service().get_cart(user.uid)

    except Exception as e:
        return handle_error(e)


@router.post("/items", response_model=Cart)
async def add_item(
    data: CartItemRequest,
    user: UserProfile = Depends(get_current_user)
):
    """
    Add units of a variant, priced for the resulting quantity.

    Raises:
        404: Product or variant not found
        422: Product unavailable or out of stock
    """
    try:
        return get_cart_service().add_item(user.uid, data)

    except Exception as e:
        return handle_error(e)


@router.patch("/items/{product_id}/{variant_id}", response_model=Cart)
async def update_item(
    product_id: str,
    variant_id: str,
    data: CartQuantityUpdate,
    user: UserProfile = Depends(get_current_user)
):
    """Set a line's quantity."""
    try:
        return get_cart_service().update_quantity(user.uid, product_id, variant_id, data.quantity)

    except Exception as e:
        return handle_error(e)


@router.delete("/items/{product_id}/{variant_id}", response_model=Cart)
async def remove_item(
    product_id: str,
    variant_id: str,
    user: UserProfile = Depends(get_current_user)
):
    try:
        return get_cart_service().remove_item(user.uid, product_id, variant_id)

    except Exception as e:
        return handle_error(e)


@router.delete("", response_model=Cart)
async def clear_cart(user: UserProfile = Depends(get_current_user)):
    """Empty the cart, e.g. after checkout."""
    try:
        return get_cart_service().clear(user.uid)

    except Exception as e:
        return handle_error(e)


@router.post("/merge", response_model=Cart)
async def merge_cart(
    data: CartMergeRequest,
    user: UserProfile = Depends(get_current_user)
):
    """Fold the device cart into the stored one after sign-in."""
    try:
        return get_cart_service().merge(user.uid, data.items)

    except Exception as e:
        return handle_error(e)
