"""Cart business logic service."""

import logging
from typing import Any

from storefront.core.config import get_settings
from storefront.core.exceptions import InsufficientStockError, NotFoundError, QuantityCapExceededError
from storefront.core.storage import get_stores
from storefront.models.cart import CartLine
from storefront.models.product import Variant
from storefront.services.pricing import ZERO, money, price_line, primary_image
from storefront.stores.base import Stores

logger = logging.getLogger(__name__)


def _line_index(items: list[CartLine], product_id: str, color: str, size: str) -> int:
    for index, item in enumerate(items):
        if item["product_id"] == product_id and item["color"] == color and item["size"] == size:
            return index
    return -1


class CartService:
    """Service for per-user cart mutation and display.

    Stock is checked only when a line is mutated. A cart can therefore hold
    quantities that no longer fit current stock; preview and order commit
    re-check every line.
    """

    def __init__(self, stores: Stores | None = None) -> None:
        """Initialize cart service with stores and settings.

        Args:
            stores: Optional store set for testing.
        """
        stores = stores or get_stores()
        self.carts = stores.carts
        self.inventory = stores.inventory
        self.max_line_quantity = get_settings().cart_max_line_quantity

    def _check_line_quantity(self, variant: Variant, quantity: int, already_in_cart: int = 0) -> None:
        if quantity > self.max_line_quantity:
            raise QuantityCapExceededError(
                f"You can't add more than {self.max_line_quantity} pieces of this product to the cart"
            )
        if quantity > variant["quantity"]:
            raise InsufficientStockError(
                f"Only {max(variant['quantity'] - already_in_cart, 0)} more available "
                f"for {variant['color']} / {variant['size']}",
                available=variant["quantity"],
            )

    def _get_cart_items(self, user_id: str) -> list[CartLine]:
        cart = self.carts.get(user_id)
        if not cart:
            raise NotFoundError("Cart not found", error_type="cart_not_found")
        return list(cart["items"])

    async def add_line(self, user_id: str, product_id: str, color: str, size: str, quantity: int = 1) -> dict[str, Any]:
        """Add units of a variant to the cart, merging with an existing line.

        Args:
            user_id: Cart owner.
            product_id: Product to add.
            color: Variant color.
            size: Variant size.
            quantity: Units to add.

        Returns:
            dict: The cart view after the change.

        Raises:
            NotFoundError: If the product does not exist.
            VariantNotFoundError: If (color, size) is not a variant of the product.
            QuantityCapExceededError: If the merged line exceeds the per-line cap.
            InsufficientStockError: If the merged line exceeds variant stock.
        """
        variant = self.inventory.get_variant(product_id, color, size)

        cart = self.carts.get(user_id)
        items = list(cart["items"]) if cart else []
        index = _line_index(items, product_id, color, size)
        existing = items[index]["quantity"] if index >= 0 else 0

        self._check_line_quantity(variant, existing + quantity, already_in_cart=existing)

        if index >= 0:
            items[index] = {**items[index], "quantity": existing + quantity}
        else:
            items.append({"product_id": product_id, "quantity": quantity, "color": color, "size": size})

        self.carts.save(user_id, items)
        return await self.view(user_id)

    async def remove_line(self, user_id: str, product_id: str, color: str, size: str) -> dict[str, Any]:
        """Remove a line; deletes the cart when it was the last one.

        Raises:
            NotFoundError: If there is no cart or no such line.
        """
        items = self._get_cart_items(user_id)
        index = _line_index(items, product_id, color, size)
        if index < 0:
            raise NotFoundError("Item not found in cart", error_type="cart_item_not_found")

        del items[index]
        return await self._save_or_delete(user_id, items)

    async def set_line_quantity(
        self, user_id: str, product_id: str, color: str, size: str, quantity: int
    ) -> dict[str, Any]:
        """Set a line's quantity. Zero removes the line.

        Raises:
            NotFoundError: If there is no cart, no such line, or the product is gone.
            VariantNotFoundError: If the variant no longer exists.
            QuantityCapExceededError: If quantity exceeds the per-line cap.
            InsufficientStockError: If quantity exceeds variant stock.
        """
        items = self._get_cart_items(user_id)
        index = _line_index(items, product_id, color, size)
        if index < 0:
            raise NotFoundError("Item not found in cart", error_type="cart_item_not_found")

        if quantity == 0:
            del items[index]
            return await self._save_or_delete(user_id, items)

        variant = self.inventory.get_variant(product_id, color, size)
        self._check_line_quantity(variant, quantity)

        items[index] = {**items[index], "quantity": quantity}
        self.carts.save(user_id, items)
        return await self.view(user_id)

    async def _save_or_delete(self, user_id: str, items: list[CartLine]) -> dict[str, Any]:
        if items:
            self.carts.save(user_id, items)
        else:
            self.carts.delete(user_id)
            logger.debug("Deleted empty cart for user %s", user_id)
        return await self.view(user_id)

    async def clear(self, user_id: str) -> None:
        """Delete the user's cart.

        Raises:
            NotFoundError: If the user has no cart.
        """
        if not self.carts.delete(user_id):
            raise NotFoundError("Cart not found", error_type="cart_not_found")

    async def view(self, user_id: str) -> dict[str, Any]:
        """Cart lines joined with current product pricing.

        Prices are live: they follow the catalog until the cart is previewed
        or ordered. Lines whose product has been deleted are kept with a
        warning and a zero total.

        Args:
            user_id: Cart owner.

        Returns:
            dict: Items with unit and line prices, and the cart subtotal.
        """
        cart = self.carts.get(user_id)
        if not cart:
            return {"user_id": user_id, "items": [], "sub_total": 0.0}

        items = []
        sub_total = ZERO
        for line in cart["items"]:
            item: dict[str, Any] = dict(line)
            product = self.inventory.get_product(line["product_id"])
            if product is None:
                item.update(unit_price=0.0, line_total=0.0, warning="Product no longer exists")
                items.append(item)
                continue

            price = price_line(product["original_price"], product.get("discount"), line["quantity"])
            sub_total += price.line_total
            item.update(
                title=product["title"],
                image=primary_image(product),
                original_price=float(price.original_price),
                unit_price=float(price.price_after_discount),
                line_total=float(price.line_total),
            )
            items.append(item)

        return {
            "user_id": user_id,
            "items": items,
            "sub_total": float(money(sub_total)),
            "updated_at": cart.get("updated_at"),
        }
