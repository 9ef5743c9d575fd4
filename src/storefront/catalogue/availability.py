"""Stock availability for a product and a shopper's selection."""

from storefront.catalogue.catalog import VariantCatalog, VariantGroup, parse_stock
from storefront.catalogue.selection import snapshot_for_group


def option_stock(group: VariantGroup, snapshot: dict) -> int | None:
    """Stock of the selected option, read from the live catalog when it still exists."""
    live = group.find(option_id=snapshot.get("id"), label=snapshot.get("label"))
    if live is not None:
        return live.stock
    return parse_stock(snapshot.get("stock"))


def available_quantity(catalog: VariantCatalog, selection: dict | None = None) -> int | None:
    """The limiting stock for this selection, or ``None`` when unlimited.

    Variant stock takes precedence: once a product has variant groups its own
    stock count is not consulted, and options without a stock are unlimited.
    """
    if not catalog.has_variants:
        return catalog.stock

    stocks = []
    group_names = {group.name for group in catalog.groups}
    for group in catalog.groups:
        snapshot = snapshot_for_group(group, selection, group_names)
        if snapshot is None:
            continue
        stock = option_stock(group, snapshot)
        if stock is not None:
            stocks.append(stock)
    return min(stocks) if stocks else None


def required_quantity(catalog: VariantCatalog, in_cart: int = 0) -> int:
    return max(1, catalog.min_buy, in_cart or 0)


def is_available(catalog: VariantCatalog, selection: dict | None = None, required_qty: int = 1) -> bool:
    limit = available_quantity(catalog, selection)
    return limit is None or limit >= required_qty
