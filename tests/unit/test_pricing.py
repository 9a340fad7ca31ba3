"""Unit tests for line and order pricing."""

from decimal import Decimal

import pytest

from storefront.services.pricing import (
    aggregate,
    build_item_snapshot,
    discount_per_unit,
    money,
    price_line,
    primary_image,
    totals_to_dict,
)

TEN_PERCENT = {"type": "percentage", "amount": 10}


class TestMoney:
    """Tests for cent rounding."""

    def test_rounds_half_up(self) -> None:
        assert money(Decimal("0.125")) == Decimal("0.13")
        assert money(Decimal("0.124")) == Decimal("0.12")

    def test_floats_use_their_shortest_repr(self) -> None:
        """2.675 is stored as 2.67499... in binary but prices as 2.68."""
        assert money(2.675) == Decimal("2.68")


class TestDiscountPerUnit:
    """Tests for discount_per_unit."""

    def test_no_discount_is_zero(self) -> None:
        assert discount_per_unit(Decimal("100.00"), None) == Decimal("0.00")

    def test_percentage(self) -> None:
        assert discount_per_unit(Decimal("100.00"), TEN_PERCENT) == Decimal("10.00")

    def test_fixed_clamped_to_price(self) -> None:
        assert discount_per_unit(Decimal("50.00"), {"type": "fixed", "amount": 80}) == Decimal("50.00")

    def test_negative_fixed_clamped_to_zero(self) -> None:
        assert discount_per_unit(Decimal("50.00"), {"type": "fixed", "amount": -5}) == Decimal("0.00")

    @pytest.mark.parametrize(
        "discount",
        [{}, {"amount": 0}, {"type": None, "amount": None}, {"type": "bogo", "amount": 1}],
    )
    def test_typeless_or_unknown_discount_is_zero(self, discount) -> None:
        assert discount_per_unit(Decimal("50.00"), discount) == Decimal("0.00")

    def test_missing_amount_is_zero(self) -> None:
        assert discount_per_unit(Decimal("50.00"), {"type": "fixed", "amount": None}) == Decimal("0.00")


class TestPriceLine:
    """Tests for price_line."""

    def test_percentage_discount_two_units(self) -> None:
        """100 at 10% off, two units."""
        price = price_line(100, TEN_PERCENT, 2)

        assert price.price_after_discount == Decimal("90.00")
        assert price.discount_per_unit == Decimal("10.00")
        assert price.line_total == Decimal("180.00")
        assert price.line_discount_total == Decimal("20.00")
        assert price.line_original_total == Decimal("200.00")

    def test_fixed_discount_larger_than_price_is_free(self) -> None:
        price = price_line(50, {"type": "fixed", "amount": 80}, 1)

        assert price.price_after_discount == Decimal("0.00")
        assert price.line_total == Decimal("0.00")
        assert price.line_discount_total == Decimal("50.00")

    def test_unit_rounding_happens_before_multiplying(self) -> None:
        """19.99 at 15% is 2.9985 off per unit, rounded to 3.00 before x3."""
        price = price_line("19.99", {"type": "percentage", "amount": 15}, 3)

        assert price.discount_per_unit == Decimal("3.00")
        assert price.price_after_discount == Decimal("16.99")
        assert price.line_total == Decimal("50.97")
        assert price.line_discount_total == Decimal("9.00")
        assert price.line_original_total == Decimal("59.97")

    def test_price_after_discount_uses_rounded_discount(self) -> None:
        """Half a cent off 1.01 rounds the discount up, so the price rounds down."""
        price = price_line("1.01", {"type": "percentage", "amount": 50}, 1)

        assert price.discount_per_unit == Decimal("0.51")
        assert price.price_after_discount == Decimal("0.50")

    def test_line_total_is_original_minus_discount(self) -> None:
        for original, discount, quantity in [
            ("33.33", {"type": "percentage", "amount": 33}, 7),
            ("0.99", {"type": "percentage", "amount": 50}, 3),
            ("120", {"type": "fixed", "amount": "0.005"}, 8),
        ]:
            price = price_line(original, discount, quantity)
            assert price.line_total == price.line_original_total - price.line_discount_total


class TestAggregate:
    """Tests for aggregate."""

    def test_totals(self) -> None:
        lines = [
            price_line(100, TEN_PERCENT, 2),
            price_line("19.99", {"type": "percentage", "amount": 15}, 3),
            price_line("45.5", None, 1),
        ]

        totals = aggregate(lines, Decimal("70"))

        assert totals.sub_total == Decimal("305.47")
        assert totals.discount_total == Decimal("29.00")
        assert totals.shipping_fee == Decimal("70.00")
        assert totals.final_total == Decimal("346.47")
        assert sum(line.line_total for line in lines) == totals.sub_total - totals.discount_total

    def test_empty_lines_only_charge_shipping(self) -> None:
        totals = aggregate([], 80)

        assert totals.sub_total == Decimal("0.00")
        assert totals.final_total == Decimal("80.00")

    def test_totals_to_dict_uses_floats(self) -> None:
        totals = aggregate([price_line(100, TEN_PERCENT, 2)], 70)

        assert totals_to_dict(totals) == {
            "sub_total": 200.0,
            "discount_total": 20.0,
            "shipping_fee": 70.0,
            "final_total": 250.0,
        }


class TestItemSnapshot:
    """Tests for build_item_snapshot and primary_image."""

    def test_snapshot_copies_product_fields(self, product_factory) -> None:
        product = product_factory()
        line = {"product_id": product["id"], "quantity": 2, "color": "red", "size": "M"}

        item = build_item_snapshot(product, line, price_line(100, TEN_PERCENT, 2))

        assert item["title"] == "Linen Shirt"
        assert item["image"] == product["images"][0]["url"]
        assert item["discount"] == TEN_PERCENT
        assert item["price_after_discount"] == 90.0
        assert item["line_total"] == 180.0
        assert item["color"] == "red"
        assert item["size"] == "M"

    def test_snapshot_without_discount(self, product_factory) -> None:
        product = product_factory(discount={})
        line = {"product_id": product["id"], "quantity": 1, "color": "red", "size": "M"}

        item = build_item_snapshot(product, line, price_line(100, None, 1))

        assert item["discount"] is None
        assert item["discount_per_unit"] == 0.0

    def test_snapshot_drops_typeless_discount(self, product_factory) -> None:
        product = product_factory(discount={"type": None, "amount": None})
        line = {"product_id": product["id"], "quantity": 2, "color": "red", "size": "M"}

        item = build_item_snapshot(product, line, price_line(100, product["discount"], 2))

        assert item["discount"] is None
        assert item["line_total"] == 200.0
        assert item["line_discount_total"] == 0.0

    def test_primary_image(self) -> None:
        assert primary_image({"images": []}) == ""
        assert primary_image({"images": ["https://cdn.example.com/a.jpg"]}) == "https://cdn.example.com/a.jpg"
        assert primary_image({"images": [{"url": "https://cdn.example.com/b.jpg"}]}) == "https://cdn.example.com/b.jpg"
