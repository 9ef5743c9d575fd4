"""Product aggregate.

Variant groups, colour swatches and media references are stored as JSON
text. Anything that needs to reason about them goes through ``catalog()``,
which returns the immutable ``VariantCatalog`` view.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.catalogue.catalog import VariantCatalog, normalize_colors, normalize_variants
from storefront.catalogue.product.events import (
    ProductCreated,
    ProductPricingUpdated,
    ProductStockDecremented,
    ProductStockSet,
    ProductVariantsUpdated,
)
from storefront.domain import storefront
from storefront.shared.errors import Forbidden, OutOfStock


def _loads(text, default):
    if not text:
        return default
    return json.loads(text)


@storefront.aggregate
class Product:
    seller_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    offer_price: Float(min_value=0.0)
    stock_quantity: Integer(min_value=0)  # None means unlimited
    min_buy: Integer(default=1, min_value=1)
    variants: Text()  # JSON list of variant groups
    colors: Text()  # JSON list of colour swatches
    media: Text()  # JSON list of media references
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(
        cls,
        seller_id,
        name,
        price,
        offer_price=None,
        stock_quantity=None,
        min_buy=1,
        variants=None,
        colors=None,
        media=None,
        description=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            seller_id=seller_id,
            name=name,
            description=description,
            price=price,
            offer_price=offer_price,
            stock_quantity=stock_quantity,
            min_buy=min_buy or 1,
            variants=json.dumps(normalize_variants(variants)),
            colors=json.dumps(normalize_colors(colors)),
            media=json.dumps(list(media or [])),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                seller_id=seller_id,
                name=name,
                price=price,
                stock_quantity=stock_quantity,
                created_at=now,
            )
        )
        return product

    def catalog(self) -> VariantCatalog:
        return VariantCatalog.build(
            product_id=self.id,
            name=self.name,
            price=self.price,
            offer_price=self.offer_price,
            stock=self.stock_quantity,
            min_buy=self.min_buy,
            variants=_loads(self.variants, []),
            colors=_loads(self.colors, []),
            seller_id=self.seller_id,
        )

    @property
    def media_refs(self) -> list[str]:
        return _loads(self.media, [])

    def assert_owned_by(self, seller_id):
        if str(self.seller_id) != str(seller_id):
            raise Forbidden("You do not own this product")

    def replace_variants(self, variants, colors=None):
        """Replace the variant groups, and the colour swatches when given.

        Option ids are carried over by label so selections already in carts
        keep matching the edited options.
        """
        previous = {
            (group.name, option.label): option.option_id for group in self.catalog().groups for option in group.options
        }
        for group in variants or []:
            for option in group.get("options") or []:
                key = (str(group.get("name", "")).strip(), str(option.get("label", "")).strip())
                if not option.get("id") and key in previous:
                    option["id"] = previous[key]

        self.variants = json.dumps(normalize_variants(variants))
        if colors is not None:
            self.colors = json.dumps(normalize_colors(colors))
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductVariantsUpdated(
                product_id=self.id,
                variants=self.variants,
                colors=self.colors,
            )
        )

    def update_pricing(self, price=None, offer_price=None, min_buy=None, clear_offer=False):
        if price is not None:
            self.price = price
        if clear_offer:
            self.offer_price = None
        elif offer_price is not None:
            self.offer_price = offer_price
        if min_buy is not None:
            self.min_buy = min_buy
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductPricingUpdated(
                product_id=self.id,
                price=self.price,
                offer_price=self.offer_price,
                min_buy=self.min_buy,
            )
        )

    def set_stock(self, quantity):
        previous = self.stock_quantity
        self.stock_quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductStockSet(
                product_id=self.id,
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def decrement_stock(self, quantity):
        """Take ``quantity`` units out of stock. Unlimited products are untouched."""
        if self.stock_quantity is None:
            return
        if self.stock_quantity < quantity:
            raise OutOfStock(self.name, self.stock_quantity)

        self.stock_quantity = self.stock_quantity - quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductStockDecremented(
                product_id=self.id,
                quantity=quantity,
                remaining=self.stock_quantity,
            )
        )
