"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A seller listed a new product."""

    __version__ = 1

    product_id: Identifier(required=True)
    seller_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    stock_quantity: Integer()
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductVariantsUpdated:
    """The variant groups or colour swatches of a product were replaced."""

    __version__ = 1

    product_id: Identifier(required=True)
    variants: Text()
    colors: Text()


@storefront.event(part_of="Product")
class ProductPricingUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    price: Float(required=True)
    offer_price: Float()
    min_buy: Integer(required=True)


@storefront.event(part_of="Product")
class ProductStockSet:
    """A seller set the product's stock count. Absent means unlimited."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_quantity: Integer()
    new_quantity: Integer()


@storefront.event(part_of="Product")
class ProductStockDecremented:
    """Units were taken out of stock by a placed order."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
