from dataclasses import dataclass
from decimal import Decimal

from storefront.catalogue.availability import available_quantity, is_available, required_quantity
from storefront.catalogue.catalog import VariantCatalog
from storefront.catalogue.pricing import floor_cents, resolve_unit_price


@dataclass(frozen=True)
class Quote:
    unit_price: Decimal
    quantity: int
    line_total: Decimal
    available: bool
    available_quantity: int | None


def quote(catalog: VariantCatalog, selection: dict | None = None, quantity: int | None = None) -> Quote:
    """Price and availability for ``quantity`` units; defaults to the minimum purchase."""
    quantity = required_quantity(catalog, quantity or 0)
    unit_price = resolve_unit_price(catalog, selection)
    return Quote(
        unit_price=unit_price,
        quantity=quantity,
        line_total=floor_cents(unit_price * quantity),
        available=is_available(catalog, selection, quantity),
        available_quantity=available_quantity(catalog, selection),
    )
