"""
Order API routes.

Customers place, list, view and cancel their own orders. Admins see
every order and move them through fulfilment.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import structlog

from models.order import (
    AdminNoteCreate,
    OrderCancel,
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderStats,
    OrderStatusUpdate,
)
from models.user import Role, UserProfile
from services.auth_service import AuthService
from services.order_service import get_order_service
from routes.dependencies import get_auth_service, get_current_user, require_admin
from routes.products import handle_error
from exceptions import PermissionDeniedError

logger = structlog.get_logger(__name__)

router = APIRouter()


def is_admin(user: UserProfile, auth: AuthService) -> bool:
    return auth.has_role(user.uid, Role.ADMIN)


# ===================
# CUSTOMER ROUTES
# ===================

@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    data: OrderCreate,
    user: UserProfile = Depends(get_current_user)
):
    """
    Place a cash-on-delivery order.

    Raises:
        404: Product or variant not found
        422: Product unavailable or out of stock
    """
    try:
        service = get_order_service()
        return service.create(user.uid, data)

    except Exception as e:
        return handle_error(e)


@router.get("/mine", response_model=OrderListResponse)
async def my_orders(user: UserProfile = Depends(get_current_user)):
    """The caller's orders, newest first."""
    try:
        service = get_order_service()
        orders = service.get_user_orders(user.uid)
        return OrderListResponse(data=orders, total=len(orders))

    except Exception as e:
        return handle_error(e)


# ===================
# ADMIN ROUTES
# ===================

@router.get("", response_model=OrderListResponse)
async def list_orders(
    status: Optional[str] = Query(None, description="Order status, or 'all'"),
    admin: UserProfile = Depends(require_admin)
):
    """Every order, newest first."""
    try:
        service = get_order_service()
        orders = service.get_all(status=status)
        return OrderListResponse(data=orders, total=len(orders))

    except Exception as e:
        return handle_error(e)


@router.get("/stats", response_model=OrderStats)
async def order_stats(admin: UserProfile = Depends(require_admin)):
    """Dashboard counters."""
    try:
        service = get_order_service()
        return service.stats()

    except Exception as e:
        return handle_error(e)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    user: UserProfile = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service)
):
    """
    One order; customers may only see their own.

    Raises:
        403: Someone else's order
        404: Order not found
    """
    try:
        service = get_order_service()
        order = service.get_by_id(order_id)
        if order.user_id != user.uid and not is_admin(user, auth):
            raise PermissionDeniedError("You can only view your own orders")
        return order

    except Exception as e:
        return handle_error(e)


@router.post("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    admin: UserProfile = Depends(require_admin)
):
    """Move an order to a new status."""
    try:
        service = get_order_service()
        return service.update_status(order_id, data.status, admin.uid, data.note)

    except Exception as e:
        return handle_error(e)


@router.post("/{order_id}/notes", response_model=OrderResponse)
async def add_admin_note(
    order_id: str,
    data: AdminNoteCreate,
    admin: UserProfile = Depends(require_admin)
):
    """Leave an internal note on an order."""
    try:
        service = get_order_service()
        return service.add_admin_note(order_id, data.note, admin.uid)

    except Exception as e:
        return handle_error(e)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    data: OrderCancel,
    user: UserProfile = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service)
):
    """
    Cancel an order. Owners can cancel before processing starts;
    admins can cancel any open order.

    Raises:
        403: Someone else's order
        404: Order not found
        409: Order can no longer be cancelled
    """
    try:
        service = get_order_service()
        order = service.get_by_id(order_id)
        admin = is_admin(user, auth)
        if order.user_id != user.uid and not admin:
            raise PermissionDeniedError("You can only cancel your own orders")
        return service.cancel(order_id, user.uid, data.reason, by_admin=admin)

    except Exception as e:
        return handle_error(e)
