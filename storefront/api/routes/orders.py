"""Order API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from storefront.api.deps import CurrentUser, OrderServiceDep
from storefront.schemas.order import OrderCreateRequest, OrderListResponse, OrderResponse, OrderStatusUpdate

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place order",
    description="Commits the caller's cart as an order, decrementing stock and clearing the cart.",
)
async def create_order(data: OrderCreateRequest, user: CurrentUser, service: OrderServiceDep) -> OrderResponse:
    """Create an order from the caller's cart.

    Uses the pending checkout's address and notes when the body omits them.

    Raises:
        InvalidShippingAddressError: 400 if no served shipping address is available.
        EmptyCartError: 400 if the cart is empty.
        VariantNotFoundError: 400 if a cart variant no longer exists.
        InsufficientStockError: 400 if stock is too low for a line.
    """
    order = await service.create_order(
        str(user.user_id),
        payment_method=data.payment_method,
        shipping_address=data.shipping_address.model_dump(exclude_none=True) if data.shipping_address else None,
        notes=data.notes,
    )
    return OrderResponse(**order)


@router.get(
    "",
    response_model=OrderListResponse,
    summary="List my orders",
)
async def list_orders(user: CurrentUser, service: OrderServiceDep) -> OrderListResponse:
    """List the caller's orders, newest first."""
    orders = await service.list_orders(str(user.user_id))
    return OrderListResponse(items=[OrderResponse(**order) for order in orders])


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order by ID",
    description="Returns a single order. Only accessible by the order owner or an admin.",
)
async def get_order(order_id: UUID, user: CurrentUser, service: OrderServiceDep) -> OrderResponse:
    """Get a single order by ID.

    Raises:
        NotFoundError: 404 if order not found.
        ForbiddenError: 403 if the caller is neither owner nor admin.
    """
    order = await service.get_order(str(order_id), user)
    return OrderResponse(**order)


@router.patch(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Update order status",
    description="Admins may set any status. Owners may only cancel a pending order.",
)
async def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    user: CurrentUser,
    service: OrderServiceDep,
) -> OrderResponse:
    """Change an order's status."""
    order = await service.update_status(str(order_id), data.status, user)
    return OrderResponse(**order)


@router.post(
    "/{order_id}/cancel",
    response_model=OrderResponse,
    summary="Cancel order",
    description="Cancels a pending order. Owner or admin only. Stock is not restored.",
)
async def cancel_order(order_id: UUID, user: CurrentUser, service: OrderServiceDep) -> OrderResponse:
    """Cancel a pending order.

    Raises:
        InvalidStateTransitionError: 400 if the order is not pending.
    """
    order = await service.cancel(str(order_id), user)
    return OrderResponse(**order)
