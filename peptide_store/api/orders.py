"""
Orders API - checkout (public) and the admin order lifecycle.
Confirm deducts stock; complete and cancel only move status. Failures come back as
{"success": false, "error": ..., "error_kind": ...} with 404 / 409 / 503.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from peptide_store.api.deps import get_order_lifecycle, get_order_repo, get_product_repo
from peptide_store.core.auth import require_role
from peptide_store.models.order import Order
from peptide_store.models.user import User, UserRole
from peptide_store.repositories.order_repo import OrderRepository
from peptide_store.repositories.product_repo import ProductRepository
from peptide_store.schemas.order import LifecycleResponse, OrderCreate, OrderListResponse, OrderResponse
from peptide_store.services.checkout import CheckoutError, StockConflictError, place_order
from peptide_store.services.order_lifecycle import LifecycleErrorKind, LifecycleResult, OrderLifecycleService

router = APIRouter(prefix="/orders", tags=["orders"])

_ERROR_STATUS = {
    LifecycleErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    LifecycleErrorKind.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    LifecycleErrorKind.STORE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_LIFECYCLE_RESPONSES = {
    404: {"model": LifecycleResponse, "description": "Order not found"},
    409: {"model": LifecycleResponse, "description": "Invalid status transition"},
    503: {"model": LifecycleResponse, "description": "Order store unavailable"},
}


def _order_to_response(order: Order) -> OrderResponse:
    return OrderResponse.model_validate(order)


def _lifecycle_response(result: LifecycleResult) -> LifecycleResponse | JSONResponse:
    body = LifecycleResponse(
        success=result.success,
        error=result.error,
        error_kind=result.error_kind.value if result.error_kind else None,
    )
    if result.success:
        return body
    return JSONResponse(content=body.model_dump(), status_code=_ERROR_STATUS[result.error_kind])


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place order (checkout)",
    description="Validates items against the catalog and stock, prices them and creates a pending order.",
    responses={
        201: {"description": "Order created"},
        400: {"description": "Unknown or unavailable product/variation"},
        409: {"description": "Insufficient stock or total mismatch"},
    },
)
async def create_order(
    body: OrderCreate,
    orders: OrderRepository = Depends(get_order_repo),
    products: ProductRepository = Depends(get_product_repo),
) -> OrderResponse:
    try:
        order = await place_order(orders, products, body)
    except StockConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except CheckoutError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    order = await orders.get_by_id(order.id)
    return _order_to_response(order)


@router.get(
    "",
    response_model=OrderListResponse,
    summary="List orders (admin)",
    description="All orders with their items and item product identity, newest first.",
)
async def list_orders(
    current_user: User = require_role(UserRole.ADMIN),
    lifecycle: OrderLifecycleService = Depends(get_order_lifecycle),
) -> OrderListResponse:
    try:
        orders = await lifecycle.fetch_orders()
    except SQLAlchemyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"Failed to fetch orders: {e}")
    return OrderListResponse(orders=[_order_to_response(o) for o in orders])


@router.get("/{order_id}", response_model=OrderResponse, summary="Get order by ID (admin)")
async def get_order(
    order_id: UUID,
    current_user: User = require_role(UserRole.ADMIN),
    lifecycle: OrderLifecycleService = Depends(get_order_lifecycle),
) -> OrderResponse:
    order = await lifecycle.get_order(order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return _order_to_response(order)


@router.post(
    "/{order_id}/confirm",
    response_model=LifecycleResponse,
    summary="Confirm order (admin)",
    description="pending -> confirmed; deducts stock for every item, floored at zero.",
    responses=_LIFECYCLE_RESPONSES,
)
async def confirm_order(
    order_id: UUID,
    current_user: User = require_role(UserRole.ADMIN),
    lifecycle: OrderLifecycleService = Depends(get_order_lifecycle),
):
    return _lifecycle_response(await lifecycle.confirm(order_id))


@router.post(
    "/{order_id}/complete",
    response_model=LifecycleResponse,
    summary="Complete order (admin)",
    description="confirmed -> completed. No stock change.",
    responses=_LIFECYCLE_RESPONSES,
)
async def complete_order(
    order_id: UUID,
    current_user: User = require_role(UserRole.ADMIN),
    lifecycle: OrderLifecycleService = Depends(get_order_lifecycle),
):
    return _lifecycle_response(await lifecycle.complete(order_id))


@router.post(
    "/{order_id}/cancel",
    response_model=LifecycleResponse,
    summary="Cancel order (admin)",
    description="pending|confirmed -> cancelled. Deducted stock is not restored.",
    responses=_LIFECYCLE_RESPONSES,
)
async def cancel_order(
    order_id: UUID,
    current_user: User = require_role(UserRole.ADMIN),
    lifecycle: OrderLifecycleService = Depends(get_order_lifecycle),
):
    return _lifecycle_response(await lifecycle.cancel(order_id))
