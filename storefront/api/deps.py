"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Header

from storefront.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt
from storefront.core.exceptions import AuthenticationError
from storefront.core.storage import get_stores
from storefront.schemas.auth import UserContext
from storefront.services.cart_service import CartService
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService


async def get_current_user(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> UserContext:
    """Extract and validate the current user from the Authorization header.

    The caller's role is looked up in the user directory rather than
    trusted from the token.

    Args:
        authorization: The Authorization header value (Bearer token).

    Returns:
        UserContext: The authenticated user's context.

    Raises:
        AuthenticationError: 401 if token is missing, invalid, or expired.
    """
    if not authorization:
        raise AuthenticationError("Authorization header required")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid authorization header format. Expected: Bearer <token>")

    try:
        payload = decode_jwt(parts[1])
    except AuthError as e:
        if e.code == AuthErrorCode.TOKEN_EXPIRED:
            raise AuthenticationError("Token has expired") from e
        raise AuthenticationError(e.message) from e

    try:
        user = payload.to_user_context()
    except ValueError as e:
        raise AuthenticationError("Token subject is not a valid user id") from e

    user.role = get_stores().users.get_role(str(user.user_id)) or "user"
    return user


def get_cart_service() -> CartService:
    return CartService()


def get_checkout_service() -> CheckoutService:
    return CheckoutService()


def get_order_service() -> OrderService:
    return OrderService()


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[UserContext, Depends(get_current_user)]
CartServiceDep = Annotated[CartService, Depends(get_cart_service)]
CheckoutServiceDep = Annotated[CheckoutService, Depends(get_checkout_service)]
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
