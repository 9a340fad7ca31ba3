"""Line and order pricing.

All amounts are Decimal and rounded half-up to cents at the point they are
computed: per unit, then per line, then per order. Because every per-unit
amount is already whole cents, line totals satisfy
line_total == line_original_total - line_discount_total exactly.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from storefront.models.cart import CartLine
from storefront.models.order import OrderItem
from storefront.models.product import Discount, Product

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def money(value: Any) -> Decimal:
    """Convert a number to a Decimal rounded to cents."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LinePrice:
    """Pricing of one line at a given quantity."""

    original_price: Decimal
    price_after_discount: Decimal
    discount_per_unit: Decimal
    line_discount_total: Decimal
    line_total: Decimal
    line_original_total: Decimal


@dataclass(frozen=True)
class Totals:
    """Aggregate order pricing."""

    sub_total: Decimal
    discount_total: Decimal
    shipping_fee: Decimal
    final_total: Decimal


DISCOUNT_TYPES = ("percentage", "fixed")


def effective_discount(discount: Discount | dict[str, Any] | None) -> Discount | None:
    """The discount if it has a known type, otherwise None.

    Products saved without a discount may still carry an empty or typeless
    discount object; those price as undiscounted.
    """
    if not discount or discount.get("type") not in DISCOUNT_TYPES:
        return None
    return {"type": discount["type"], "amount": float(discount.get("amount") or 0)}


def discount_per_unit(original_price: Decimal, discount: Discount | None) -> Decimal:
    """Per-unit discount, clamped to [0, original_price].

    A missing, empty or unrecognised discount is worth nothing.
    """
    discount = effective_discount(discount)
    if discount is None:
        return ZERO

    amount = Decimal(str(discount["amount"]))
    if discount["type"] == "percentage":
        value = money(original_price * amount / 100)
    else:
        value = money(amount)

    return min(max(value, ZERO), original_price)


def price_line(original_price: Any, discount: Discount | None, quantity: int) -> LinePrice:
    """Price a single line.

    Args:
        original_price: Undiscounted unit price.
        discount: Optional percentage or fixed discount.
        quantity: Units on the line.

    Returns:
        LinePrice: Per-unit and per-line amounts.
    """
    original = money(original_price)
    per_unit = discount_per_unit(original, discount)
    price_after_discount = money(original - per_unit)

    return LinePrice(
        original_price=original,
        price_after_discount=price_after_discount,
        discount_per_unit=per_unit,
        line_discount_total=money(per_unit * quantity),
        line_total=money(price_after_discount * quantity),
        line_original_total=money(original * quantity),
    )


def aggregate(lines: Iterable[LinePrice], shipping_fee: Any) -> Totals:
    """Sum line prices into order totals and add shipping."""
    lines = list(lines)
    sub_total = money(sum((line.line_original_total for line in lines), ZERO))
    discount_total = money(sum((line.line_discount_total for line in lines), ZERO))
    fee = money(shipping_fee)

    return Totals(
        sub_total=sub_total,
        discount_total=discount_total,
        shipping_fee=fee,
        final_total=money(sub_total - discount_total + fee),
    )


def primary_image(product: Product) -> str:
    """URL of the product's first image, or an empty string."""
    images = product.get("images") or []
    if not images:
        return ""
    first = images[0]
    if isinstance(first, dict):
        return first.get("url") or ""
    return str(first)


def build_item_snapshot(product: Product, line: CartLine, price: LinePrice) -> OrderItem:
    """Freeze a priced cart line into an order item.

    Title, image and prices are copied from the product as it is now, so
    later catalog edits never change the item.
    """
    return {
        "product_id": line["product_id"],
        "quantity": line["quantity"],
        "color": line["color"],
        "size": line["size"],
        "title": product["title"],
        "image": primary_image(product),
        "original_price": float(price.original_price),
        "price_after_discount": float(price.price_after_discount),
        "discount": effective_discount(product.get("discount")),
        "discount_per_unit": float(price.discount_per_unit),
        "line_discount_total": float(price.line_discount_total),
        "line_total": float(price.line_total),
        "line_original_total": float(price.line_original_total),
    }


def totals_to_dict(totals: Totals) -> dict[str, float]:
    """Totals as JSON-friendly floats keyed like the order columns."""
    return {
        "sub_total": float(totals.sub_total),
        "discount_total": float(totals.discount_total),
        "shipping_fee": float(totals.shipping_fee),
        "final_total": float(totals.final_total),
    }
