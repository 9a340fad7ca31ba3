"""Cart API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from storefront.api.deps import CartServiceDep, CurrentUser
from storefront.schemas.cart import CartItemAdd, CartItemUpdate, CartResponse

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get(
    "",
    response_model=CartResponse,
    summary="Get my cart",
    description="Returns the caller's cart priced at current catalog prices.",
)
async def get_cart(user: CurrentUser, service: CartServiceDep) -> CartResponse:
    """Get the current user's cart.

    Prices are live and may differ from what a later checkout charges.
    """
    cart = await service.view(str(user.user_id))
    return CartResponse(**cart)


@router.post(
    "/items",
    response_model=CartResponse,
    summary="Add to cart",
    description="Adds units of a product variant, merging with an existing line.",
)
async def add_cart_item(data: CartItemAdd, user: CurrentUser, service: CartServiceDep) -> CartResponse:
    """Add a product variant to the cart.

    Raises:
        VariantNotFoundError: 400 if the color/size is not available.
        InsufficientStockError: 400 if stock is too low.
        QuantityCapExceededError: 400 if the line would exceed the cap.
    """
    cart = await service.add_line(
        str(user.user_id),
        str(data.product_id),
        data.color,
        data.size,
        data.quantity,
    )
    return CartResponse(**cart)


@router.patch(
    "/items/{product_id}/{color}/{size}",
    response_model=CartResponse,
    summary="Update cart line quantity",
    description="Sets a line's quantity. Zero removes the line.",
)
async def update_cart_item(
    product_id: UUID,
    color: str,
    size: str,
    data: CartItemUpdate,
    user: CurrentUser,
    service: CartServiceDep,
) -> CartResponse:
    """Set the quantity of a cart line."""
    cart = await service.set_line_quantity(str(user.user_id), str(product_id), color, size, data.quantity)
    return CartResponse(**cart)


@router.delete(
    "/items/{product_id}/{color}/{size}",
    response_model=CartResponse,
    summary="Remove cart line",
)
async def remove_cart_item(
    product_id: UUID,
    color: str,
    size: str,
    user: CurrentUser,
    service: CartServiceDep,
) -> CartResponse:
    """Remove a line from the cart. Removing the last line deletes the cart."""
    cart = await service.remove_line(str(user.user_id), str(product_id), color, size)
    return CartResponse(**cart)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear cart",
)
async def clear_cart(user: CurrentUser, service: CartServiceDep) -> None:
    """Delete the caller's cart."""
    await service.clear(str(user.user_id))
