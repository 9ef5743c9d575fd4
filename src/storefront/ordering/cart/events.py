"""Domain events for the CartLedger aggregate."""

from protean.fields import Identifier, Integer, Text

from storefront.domain import storefront


@storefront.event(part_of="CartLedger")
class CartLineAdded:
    """A shopper added a product configuration to the cart."""

    __version__ = 1

    buyer_id = Identifier(required=True)
    line_key = Text(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.event(part_of="CartLedger")
class CartLineQuantitySet:
    __version__ = 1

    buyer_id = Identifier(required=True)
    line_key = Text(required=True)
    requested_quantity = Integer(required=True)
    quantity = Integer(required=True)


@storefront.event(part_of="CartLedger")
class CartLineRemoved:
    __version__ = 1

    buyer_id = Identifier(required=True)
    line_key = Text(required=True)


@storefront.event(part_of="CartLedger")
class CartCleared:
    """The cart was emptied after an order was placed."""

    __version__ = 1

    buyer_id = Identifier(required=True)
    line_count = Integer(required=True)
