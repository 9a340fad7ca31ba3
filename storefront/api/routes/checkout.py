"""Checkout preview API routes."""

from fastapi import APIRouter

from storefront.api.deps import CheckoutServiceDep, CurrentUser
from storefront.schemas.checkout import CheckoutPreviewRequest, CheckoutPreviewResponse

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post(
    "/preview",
    response_model=CheckoutPreviewResponse,
    summary="Preview checkout",
    description="Prices the cart for a shipping address and stores it as the pending checkout. Does not reserve stock.",
)
async def preview_checkout(
    data: CheckoutPreviewRequest,
    user: CurrentUser,
    service: CheckoutServiceDep,
) -> CheckoutPreviewResponse:
    """Price the caller's cart and replace their pending checkout.

    Raises:
        InvalidShippingAddressError: 400 if the governorate is not served.
        EmptyCartError: 400 if the cart is empty.
    """
    checkout = await service.preview(
        str(user.user_id),
        data.shipping_address.model_dump(exclude_none=True),
        data.notes,
    )
    return CheckoutPreviewResponse(**checkout)


@router.get(
    "/preview",
    response_model=CheckoutPreviewResponse,
    summary="Get pending checkout",
)
async def get_checkout_preview(user: CurrentUser, service: CheckoutServiceDep) -> CheckoutPreviewResponse:
    """Return the caller's most recent checkout preview."""
    checkout = await service.get(str(user.user_id))
    return CheckoutPreviewResponse(**checkout)
