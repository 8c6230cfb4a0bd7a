# ==============================================================================
# ORDER ENDPOINTS - Placement, History & Status Transitions
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from smartcow.api.dependencies import CurrentIdentity, FacadeDep
from smartcow.core.exceptions import BusinessRuleError, NotFoundError
from smartcow.schemas.base import APIResponse
from smartcow.schemas.marketplace import Order, OrderCreate, OrderStatusUpdate

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=APIResponse[Order],
    status_code=status.HTTP_201_CREATED,
    summary="Place order",
    description="Place an order as the current identity; the seller gets a system chat message.",
)
async def create_order(
    identity: CurrentIdentity,
    schema: OrderCreate,
    facade: FacadeDep,
) -> APIResponse[Order]:
    order = await facade.orders.create_order(identity, schema)
    return APIResponse.ok(data=order, message="Order placed successfully")


@router.get(
    "/seller",
    response_model=APIResponse[List[Order]],
    summary="Orders received",
)
async def seller_orders(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[Order]]:
    return APIResponse.ok(data=await facade.orders.list_seller_orders(identity))


@router.get(
    "/buyer",
    response_model=APIResponse[List[Order]],
    summary="Order history",
)
async def buyer_orders(
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[List[Order]]:
    return APIResponse.ok(data=await facade.orders.list_buyer_orders(identity))


@router.get(
    "/{order_id}",
    response_model=APIResponse[Order],
    summary="Get order",
)
async def get_order(
    order_id: str,
    identity: CurrentIdentity,
    facade: FacadeDep,
) -> APIResponse[Order]:
    order = await facade.orders.get_order(order_id)
    if order is None or identity not in (order.seller_id, order.buyer_id):
        raise NotFoundError("Order not found", resource_type="order", resource_id=order_id)
    return APIResponse.ok(data=order)


@router.patch(
    "/{order_id}/status",
    response_model=APIResponse[Order],
    summary="Move order forward",
    description="pending -> processing -> completed; completion credits the seller once.",
)
async def update_status(
    order_id: str,
    identity: CurrentIdentity,
    schema: OrderStatusUpdate,
    facade: FacadeDep,
) -> APIResponse[Order]:
    order = await facade.orders.update_order_status(identity, order_id, schema.status)
    if order is None:
        raise BusinessRuleError(
            "Order status change rejected",
            rule="forward_only_owned_orders",
        )
    return APIResponse.ok(data=order)
