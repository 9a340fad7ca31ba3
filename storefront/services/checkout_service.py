"""Checkout preview business logic service."""

import logging

from storefront.core.exceptions import EmptyCartError, InsufficientStockError, NotFoundError
from storefront.core.storage import get_stores
from storefront.models.cart import CartLine
from storefront.models.checkout import PendingCheckout
from storefront.models.order import OrderItem, ShippingAddress
from storefront.services.pricing import LinePrice, aggregate, build_item_snapshot, price_line, totals_to_dict
from storefront.services.shipping import get_shipping_fee
from storefront.stores.base import InventoryStore, Stores

logger = logging.getLogger(__name__)


def price_cart_line(inventory: InventoryStore, line: CartLine) -> tuple[OrderItem, LinePrice]:
    """Validate a cart line against current stock and price it.

    Raises:
        NotFoundError: If the product no longer exists (400).
        VariantNotFoundError: If the variant no longer exists.
        InsufficientStockError: If the variant holds fewer units than the line.
    """
    product, variant = inventory.resolve(line["product_id"], line["color"], line["size"], in_cart=True)
    if variant["quantity"] < line["quantity"]:
        raise InsufficientStockError(
            f"Insufficient stock for {product['title']} ({line['color']}, {line['size']})",
            available=variant["quantity"],
        )
    price = price_line(product["original_price"], product.get("discount"), line["quantity"])
    return build_item_snapshot(product, line, price), price


class CheckoutService:
    """Service for pricing a cart into a pending checkout snapshot.

    Previews never touch inventory and can be repeated freely; each one
    replaces the user's previous snapshot.
    """

    def __init__(self, stores: Stores | None = None) -> None:
        stores = stores or get_stores()
        self.carts = stores.carts
        self.checkouts = stores.checkouts
        self.inventory = stores.inventory

    async def preview(self, user_id: str, shipping_address: ShippingAddress, notes: str = "") -> PendingCheckout:
        """Price the user's cart and store it as their pending checkout.

        Args:
            user_id: Cart owner.
            shipping_address: Destination; its governorate sets the fee.
            notes: Free-form order notes.

        Returns:
            PendingCheckout: The stored snapshot.

        Raises:
            InvalidShippingAddressError: If the governorate is not served.
            EmptyCartError: If the user has no cart lines.
            NotFoundError: If a cart line's product was deleted.
            VariantNotFoundError: If a cart line's variant was removed.
            InsufficientStockError: If a cart line exceeds current stock.
        """
        shipping_fee = get_shipping_fee(shipping_address.get("governorate"))

        cart = self.carts.get(user_id)
        if not cart or not cart["items"]:
            raise EmptyCartError()

        items: list[OrderItem] = []
        prices: list[LinePrice] = []
        for line in cart["items"]:
            item, price = price_cart_line(self.inventory, line)
            items.append(item)
            prices.append(price)

        totals = aggregate(prices, shipping_fee)
        checkout: PendingCheckout = {
            "user_id": user_id,
            "shipping_address": shipping_address,
            "notes": notes,
            "items": items,
            **totals_to_dict(totals),
        }

        stored = self.checkouts.upsert(checkout)
        logger.info("Checkout preview for user %s: %d items, total %s", user_id, len(items), totals.final_total)
        return stored

    async def get(self, user_id: str) -> PendingCheckout:
        """Return the user's current pending checkout.

        Raises:
            NotFoundError: If the user has not previewed a checkout.
        """
        checkout = self.checkouts.get(user_id)
        if not checkout:
            raise NotFoundError("No pending checkout", error_type="checkout_not_found")
        return checkout
