"""Application error hierarchy.

Services and stores raise these; the error handling middleware renders them
as ErrorResponse JSON with the carried status code and error type.
"""

from typing import Any

from fastapi import status


class APIError(Exception):
    """Base exception for API errors.

    Use this class to raise application-specific errors that should
    be returned to the client with a specific status code and message.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_type: str = "api_error",
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code to return.
            error_type: Error category/type for client handling.
            details: Optional additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: list[dict[str, Any]] | None = None,
        error_type: str = "not_found",
        status_code: int = status.HTTP_404_NOT_FOUND,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type=error_type,
            details=details,
        )


class ValidationError(APIError):
    """User-correctable request error."""

    def __init__(
        self,
        message: str = "Validation error",
        details: list[dict[str, Any]] | None = None,
        error_type: str = "validation_error",
    ) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_type=error_type,
            details=details,
        )


class StateConflictError(APIError):
    """Request conflicts with the current state of a record."""

    def __init__(
        self,
        message: str = "State conflict",
        details: list[dict[str, Any]] | None = None,
        error_type: str = "state_conflict",
    ) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_type=error_type,
            details=details,
        )


class AuthenticationError(APIError):
    """Authentication failure error."""

    def __init__(self, message: str = "Authentication required", details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_type="authentication_error",
            details=details,
        )


class AuthorizationError(APIError):
    """Authorization failure error."""

    def __init__(
        self,
        message: str = "Access denied",
        details: list[dict[str, Any]] | None = None,
        error_type: str = "authorization_error",
    ) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_type=error_type,
            details=details,
        )


# Checkout and order errors


class InvalidShippingAddressError(ValidationError):
    """Shipping governorate is missing or not served."""

    def __init__(self, message: str = "Valid shipping address is required") -> None:
        super().__init__(message=message, error_type="invalid_shipping_address")


class EmptyCartError(ValidationError):
    """The user has no cart, or the cart has no lines."""

    def __init__(self, message: str = "Cart is empty") -> None:
        super().__init__(message=message, error_type="empty_cart")


class VariantNotFoundError(NotFoundError):
    """A (color, size) selector does not match any variant of the product.

    Reported as 400 since the selector came from the client or a stale cart.
    """

    def __init__(self, message: str = "Selected color/size is not available") -> None:
        super().__init__(
            message=message,
            error_type="variant_not_found",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class InsufficientStockError(StateConflictError):
    """Requested quantity exceeds the variant's current stock."""

    def __init__(self, message: str = "Insufficient stock", available: int | None = None) -> None:
        details = [{"msg": f"{available} available", "type": "available_quantity"}] if available is not None else None
        super().__init__(message=message, details=details, error_type="insufficient_stock")
        self.available = available


class QuantityCapExceededError(StateConflictError):
    """Merged cart line quantity exceeds the per-line cap."""

    def __init__(self, message: str = "Cart line quantity limit exceeded") -> None:
        super().__init__(message=message, error_type="quantity_cap_exceeded")


class InvalidStateTransitionError(StateConflictError):
    """Order status change not allowed from its current status."""

    def __init__(self, message: str = "Invalid order status transition") -> None:
        super().__init__(message=message, error_type="invalid_state_transition")


class ForbiddenError(AuthorizationError):
    """Caller is neither the record's owner nor an admin."""

    def __init__(self, message: str = "You are not authorized to perform this action") -> None:
        super().__init__(message=message, error_type="forbidden")


