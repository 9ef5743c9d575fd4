"""Unit price resolution for a product and a shopper's selection.

The same function prices a quote, a cart total and an order line, so the
three can never disagree.
"""

from decimal import ROUND_FLOOR, Decimal

from storefront.catalogue.catalog import VariantCatalog, parse_number
from storefront.catalogue.selection import selected_options

CENT = Decimal("0.01")


def floor_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_FLOOR)


def resolve_unit_price(catalog: VariantCatalog, selection: dict | None = None) -> Decimal:
    """Price one unit of ``catalog`` configured as ``selection``.

    The highest absolute option price replaces the base price; every option's
    delta is then added on top. Option values are read from the selection
    snapshot, only the base comes from the catalog.
    """
    options = selected_options(selection)
    price = catalog.base_price

    absolute = [number for number in (parse_number(option.get("price")) for option in options) if number is not None]
    if absolute:
        price = max(absolute)

    for option in options:
        delta = parse_number(option.get("priceDelta"))
        if delta is not None:
            price += delta

    return floor_cents(price)
