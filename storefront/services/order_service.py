"""Order commit pipeline and order lifecycle service."""

import logging

from storefront.core.config import get_settings
from storefront.core.exceptions import (
    EmptyCartError,
    ForbiddenError,
    InvalidShippingAddressError,
    InvalidStateTransitionError,
    NotFoundError,
)
from storefront.core.storage import get_stores
from storefront.models.cart import CartLine
from storefront.models.order import Order, OrderItem, OrderStatus, PaymentMethod, ShippingAddress
from storefront.schemas.auth import UserContext
from storefront.services.checkout_service import price_cart_line
from storefront.services.notification_service import NotificationService
from storefront.services.order_number_service import OrderNumberAllocator
from storefront.services.pricing import LinePrice, aggregate, totals_to_dict
from storefront.services.shipping import get_shipping_fee
from storefront.stores.base import Stores

logger = logging.getLogger(__name__)

# Statuses an admin may set directly; cancellation has its own rules.
ADMIN_SETTABLE_STATUSES: frozenset[str] = frozenset({"pending", "confirmed", "shipped", "delivered"})


class OrderService:
    """Turns carts into orders and manages order status.

    The stores only guarantee single-record atomicity, so create_order
    coordinates several records itself: stock is decremented line by line
    with a conditional update, and if anything fails before the order row
    is written, the decrements already made are restocked.
    """

    def __init__(
        self,
        stores: Stores | None = None,
        allocator: OrderNumberAllocator | None = None,
        notifier: NotificationService | None = None,
    ) -> None:
        """Initialize order service.

        Args:
            stores: Optional store set for testing.
            allocator: Optional order number allocator for testing.
            notifier: Optional notification service for testing.
        """
        stores = stores or get_stores()
        self.carts = stores.carts
        self.checkouts = stores.checkouts
        self.inventory = stores.inventory
        self.orders = stores.orders
        self.allocator = allocator or OrderNumberAllocator(stores.counters)
        self.notifier = notifier or NotificationService(stores)
        self.restock_on_failure = get_settings().checkout_restock_on_failure

    async def create_order(
        self,
        user_id: str,
        payment_method: PaymentMethod = "cash",
        shipping_address: ShippingAddress | None = None,
        notes: str | None = None,
    ) -> Order:
        """Commit the user's cart as an order.

        When no shipping address is given, the address and notes from the
        user's pending checkout are used. Prices are always taken from the
        catalog as it is at commit time.

        Args:
            user_id: Cart owner.
            payment_method: How the order will be paid.
            shipping_address: Optional destination overriding the pending checkout.
            notes: Optional notes overriding the pending checkout.

        Returns:
            Order: The created order.

        Raises:
            InvalidShippingAddressError: If there is no usable shipping address.
            EmptyCartError: If the user has no cart lines.
            NotFoundError: If a cart line's product was deleted (400).
            VariantNotFoundError: If a cart line's variant was removed.
            InsufficientStockError: If a cart line exceeds current stock.
        """
        if shipping_address is None:
            pending = self.checkouts.get(user_id)
            if not pending:
                raise InvalidShippingAddressError()
            shipping_address = pending["shipping_address"]
            if notes is None:
                notes = pending.get("notes") or ""

        shipping_fee = get_shipping_fee(shipping_address.get("governorate"))

        cart = self.carts.get(user_id)
        if not cart or not cart["items"]:
            raise EmptyCartError()

        # Allocated up front; a failed commit leaves a gap in the sequence.
        order_number = self.allocator.next_order_number()

        decremented: list[CartLine] = []
        try:
            items: list[OrderItem] = []
            prices: list[LinePrice] = []
            for line in cart["items"]:
                item, price = price_cart_line(self.inventory, line)
                self.inventory.decrement_if_available(
                    line["product_id"], line["color"], line["size"], line["quantity"]
                )
                decremented.append(line)
                items.append(item)
                prices.append(price)

            totals = aggregate(prices, shipping_fee)
            order = self.orders.create(
                {
                    "order_number": order_number,
                    "user_id": user_id,
                    "items": items,
                    **totals_to_dict(totals),
                    "payment_method": payment_method,
                    "shipping_address": shipping_address,
                    "notes": notes or "",
                    "status": "pending",
                }
            )
        except Exception:
            if decremented and self.restock_on_failure:
                self._restock(decremented, order_number)
            elif decremented:
                logger.warning(
                    "Order %s failed after decrementing %d lines; stock not restored",
                    order_number,
                    len(decremented),
                )
            raise

        logger.info("Created order %s for user %s, total %s", order_number, user_id, order["final_total"])

        try:
            await self.notifier.order_created(order)
        except Exception:
            logger.exception("Failed to notify admins of order %s", order_number)

        try:
            self.carts.delete(user_id)
            self.checkouts.delete(user_id)
        except Exception:
            logger.exception("Order %s placed but cart cleanup for user %s failed", order_number, user_id)
        return order

    def _restock(self, lines: list[CartLine], order_number: str) -> None:
        """Return decremented stock in reverse order. Failures are logged, not raised."""
        logger.warning("Order %s failed; restocking %d lines", order_number, len(lines))
        for line in reversed(lines):
            try:
                self.inventory.restock(line["product_id"], line["color"], line["size"], line["quantity"])
            except Exception:
                logger.exception(
                    "Failed to restock %s (%s, %s) x%d for order %s",
                    line["product_id"],
                    line["color"],
                    line["size"],
                    line["quantity"],
                    order_number,
                )

    def _load_for(self, order_id: str, caller: UserContext) -> Order:
        order = self.orders.get(order_id)
        if not order:
            raise NotFoundError("Order not found", error_type="order_not_found")
        if order["user_id"] != str(caller.user_id) and not caller.is_admin:
            raise ForbiddenError("You are not authorized to access this order")
        return order

    async def get_order(self, order_id: str, caller: UserContext) -> Order:
        """Get an order visible to its owner or an admin.

        Raises:
            NotFoundError: If the order does not exist.
            ForbiddenError: If the caller is neither owner nor admin.
        """
        return self._load_for(order_id, caller)

    async def list_orders(self, user_id: str) -> list[Order]:
        """List a user's orders, newest first."""
        return self.orders.list_for_user(user_id)

    async def update_status(self, order_id: str, status: OrderStatus, caller: UserContext) -> Order:
        """Set an order's status.

        Cancellation follows cancel(). Any other status is an admin-only
        overwrite regardless of the current status.

        Raises:
            ForbiddenError: If a non-admin sets a status other than cancelled.
            InvalidStateTransitionError: If the status is not settable.
            NotFoundError: If the order does not exist.
        """
        if status == "cancelled":
            return await self.cancel(order_id, caller)

        if not caller.is_admin:
            raise ForbiddenError("Only admins can update order status")
        if status not in ADMIN_SETTABLE_STATUSES:
            raise InvalidStateTransitionError(f"Unknown order status: {status}")

        order = self.orders.set_status(order_id, status)
        if not order:
            raise NotFoundError("Order not found", error_type="order_not_found")

        logger.info("Order %s status set to %s by %s", order["order_number"], status, caller.user_id)
        try:
            await self.notifier.order_status_updated(order)
        except Exception:
            logger.exception("Failed to notify owner of order %s", order["order_number"])
        return order

    async def cancel(self, order_id: str, caller: UserContext) -> Order:
        """Cancel a pending order. Stock is not restored.

        Raises:
            NotFoundError: If the order does not exist.
            ForbiddenError: If the caller is neither owner nor admin.
            InvalidStateTransitionError: If the order is not pending.
        """
        order = self._load_for(order_id, caller)
        if order["status"] != "pending":
            raise InvalidStateTransitionError("Order can only be cancelled if it is in pending status")

        cancelled = self.orders.set_status(order_id, "cancelled", expected="pending")
        if not cancelled:
            # Status moved on between the read and the conditional write
            raise InvalidStateTransitionError("Order can only be cancelled if it is in pending status")

        logger.info("Order %s cancelled by %s", cancelled["order_number"], caller.user_id)
        try:
            await self.notifier.order_cancelled(cancelled)
        except Exception:
            logger.exception("Failed to send cancellation notifications for order %s", cancelled["order_number"])
        return cancelled
