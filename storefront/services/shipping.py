"""Flat shipping fees by governorate."""

from decimal import Decimal

from storefront.core.exceptions import InvalidShippingAddressError

SHIPPING_RATES: dict[str, Decimal] = {
    "Cairo": Decimal("70"),
    "Tagamoa": Decimal("70"),
    "Rehab": Decimal("70"),
    "New Cairo City": Decimal("90"),
    "Madinaty": Decimal("90"),
    "Shorouk": Decimal("90"),
    "Obour": Decimal("90"),
    "Mostakbal City": Decimal("90"),
    "Badr": Decimal("90"),
    "Giza": Decimal("80"),
    "Mohandessin": Decimal("80"),
    "Al Haram": Decimal("80"),
    "Al Agouzah": Decimal("80"),
    "Dokki": Decimal("80"),
    "6th of October": Decimal("90"),
    "October Gardens": Decimal("90"),
    "Pyramids Gardens": Decimal("90"),
}

GOVERNORATES: frozenset[str] = frozenset(SHIPPING_RATES)


def get_shipping_fee(governorate: str | None) -> Decimal:
    """Look up the shipping fee for a governorate.

    Raises:
        InvalidShippingAddressError: If the governorate is missing or unknown.
    """
    if not governorate:
        raise InvalidShippingAddressError()
    if governorate not in GOVERNORATES:
        raise InvalidShippingAddressError(f"Invalid governorate: {governorate}")
    return SHIPPING_RATES[governorate]
