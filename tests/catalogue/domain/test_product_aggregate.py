"""Tests for the Product aggregate."""

import json

import pytest
from storefront.catalogue.product.events import (
    ProductCreated,
    ProductStockDecremented,
    ProductVariantsUpdated,
)
from storefront.catalogue.product.product import Product
from storefront.shared.errors import Forbidden, OutOfStock

VARIANTS = [
    {
        "name": "Size",
        "options": [
            {"label": "S", "stock": 3},
            {"label": "L", "priceDelta": 20, "colors": ["Red", "Blue"]},
        ],
    }
]


def _product(**overrides):
    fields = {"seller_id": "seller-1", "name": "Tee", "price": 100.0}
    fields.update(overrides)
    return Product.create(**fields)


class TestCreate:
    def test_create_defaults(self):
        product = _product()
        assert product.min_buy == 1
        assert product.stock_quantity is None
        assert json.loads(product.variants) == []
        assert product.media_refs == []

    def test_create_raises_event(self):
        product = _product(stock_quantity=4)
        events = [e for e in product._events if isinstance(e, ProductCreated)]
        assert len(events) == 1
        assert events[0].stock_quantity == 4

    def test_create_normalizes_variants(self):
        product = _product(variants=VARIANTS)
        stored = json.loads(product.variants)
        assert all(option["id"] for option in stored[0]["options"])

    def test_catalog_reflects_product(self):
        product = _product(offer_price=90.0, stock_quantity=5, min_buy=2, variants=VARIANTS)
        catalog = product.catalog()
        assert catalog.product_id == str(product.id)
        assert catalog.seller_id == "seller-1"
        assert catalog.min_buy == 2
        assert catalog.group("Size").find(label="L").colors == ("Red", "Blue")


class TestStock:
    def test_decrement_reduces_stock(self):
        product = _product(stock_quantity=5)
        product.decrement_stock(2)
        assert product.stock_quantity == 3
        event = [e for e in product._events if isinstance(e, ProductStockDecremented)][0]
        assert event.remaining == 3

    def test_decrement_to_zero(self):
        product = _product(stock_quantity=2)
        product.decrement_stock(2)
        assert product.stock_quantity == 0

    def test_decrement_beyond_stock_fails_and_keeps_stock(self):
        product = _product(stock_quantity=1)
        with pytest.raises(OutOfStock) as exc:
            product.decrement_stock(2)
        assert exc.value.available == 1
        assert exc.value.product_name == "Tee"
        assert str(exc.value) == "Only 1 left for Tee"
        assert product.stock_quantity == 1

    def test_unlimited_stock_is_untouched(self):
        product = _product()
        product.decrement_stock(1_000)
        assert product.stock_quantity is None

    def test_set_stock_to_unlimited(self):
        product = _product(stock_quantity=5)
        product.set_stock(None)
        assert product.stock_quantity is None


class TestOwnership:
    def test_owner_passes(self):
        _product().assert_owned_by("seller-1")

    def test_other_seller_is_forbidden(self):
        with pytest.raises(Forbidden):
            _product().assert_owned_by("seller-2")


class TestReplaceVariants:
    def test_option_ids_survive_an_edit(self):
        product = _product(variants=VARIANTS)
        before = {o["label"]: o["id"] for o in json.loads(product.variants)[0]["options"]}

        product.replace_variants(
            [{"name": "Size", "options": [{"label": "S", "stock": 10}, {"label": "XL"}]}]
        )

        after = {o["label"]: o["id"] for o in json.loads(product.variants)[0]["options"]}
        assert after["S"] == before["S"]
        assert after["XL"] not in before.values()
        assert product.catalog().group("Size").find(label="S").stock == 10

    def test_colours_kept_when_not_given(self):
        product = _product(colors=[{"label": "Red"}])
        product.replace_variants([])
        assert json.loads(product.colors)[0]["label"] == "Red"

    def test_raises_event(self):
        product = _product()
        product.replace_variants(VARIANTS, colors=["Green"])
        assert any(isinstance(e, ProductVariantsUpdated) for e in product._events)
        assert json.loads(product.colors)[0]["label"] == "Green"


class TestPricing:
    def test_update_pricing(self):
        product = _product(offer_price=90.0)
        product.update_pricing(price=120.0, min_buy=3)
        assert product.price == 120.0
        assert product.offer_price == 90.0
        assert product.min_buy == 3

    def test_clear_offer(self):
        product = _product(offer_price=90.0)
        product.update_pricing(clear_offer=True)
        assert product.offer_price is None
