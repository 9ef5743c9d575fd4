"""Cart line management: commands, handler and the cart summary query."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.catalogue.catalog import VariantCatalog
from storefront.catalogue.pricing import resolve_unit_price
from storefront.catalogue.product.product import Product
from storefront.catalogue.selection import decode
from storefront.domain import storefront
from storefront.ordering.cart.cart import CartLedger


@storefront.command(part_of="CartLedger")
class AddCartLine:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    selection = Text()  # JSON selection; omitted for a plain product


@storefront.command(part_of="CartLedger")
class SetCartLineQuantity:
    buyer_id = Identifier(required=True)
    line_key = Text(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="CartLedger")
class ClearCart:
    buyer_id = Identifier(required=True)


def catalog_for(product_id) -> VariantCatalog | None:
    """The live catalog of a product, or ``None`` when it has been deleted."""
    try:
        return current_domain.repository_for(Product).get(product_id).catalog()
    except ObjectNotFoundError:
        return None


def load_cart(buyer_id) -> CartLedger:
    try:
        return current_domain.repository_for(CartLedger).get(str(buyer_id))
    except ObjectNotFoundError:
        return CartLedger.create(buyer_id)


@storefront.command_handler(part_of=CartLedger)
class ManageCartLinesHandler:
    @handle(AddCartLine)
    def add_line(self, command):
        product = current_domain.repository_for(Product).get(command.product_id)
        selection = json.loads(command.selection) if command.selection else None

        cart = load_cart(command.buyer_id)
        key = cart.add(product.catalog(), selection)
        current_domain.repository_for(CartLedger).add(cart)
        return key

    @handle(SetCartLineQuantity)
    def set_quantity(self, command):
        product_id, _ = decode(command.line_key)

        cart = load_cart(command.buyer_id)
        stored = cart.set_quantity(command.line_key, command.quantity, catalog_for(product_id))
        current_domain.repository_for(CartLedger).add(cart)
        return stored

    @handle(ClearCart)
    def clear(self, command):
        cart = load_cart(command.buyer_id)
        if not cart.lines:
            return
        cart.clear()
        current_domain.repository_for(CartLedger).add(cart)


def cart_summary(buyer_id) -> dict:
    """The buyer's cart priced against the live catalog."""
    cart = load_cart(buyer_id)
    catalogs = {}

    def lookup(product_id):
        if product_id not in catalogs:
            catalogs[product_id] = catalog_for(product_id)
        return catalogs[product_id]

    lines = []
    for line in cart.lines:
        catalog = lookup(str(line.product_id))
        lines.append(
            {
                "key": line.line_key,
                "product_id": str(line.product_id),
                "selection": line.selection,
                "quantity": line.quantity,
                "unit_price": float(resolve_unit_price(catalog, line.selection)) if catalog else None,
                "available": catalog is not None,
            }
        )

    return {"buyer_id": str(buyer_id), "lines": lines, "total": float(cart.total(lookup))}
