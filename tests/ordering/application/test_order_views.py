"""Tests for the caller-shaped order read models."""

import pytest
from protean import current_domain
from storefront.ordering.order.notes import SaveAdminNote
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import place_order
from storefront.ordering.order.views import seller_orders, view_for
from storefront.shared.caller import Caller, Role
from storefront.shared.errors import Forbidden

SELLER_1 = Caller(user_id="seller-1", role=Role.SELLER)
SELLER_2 = Caller(user_id="seller-2", role=Role.SELLER)
BUYER = Caller(user_id="buyer-1", role=Role.BUYER)


@pytest.fixture
def order(make_product):
    first = make_product(seller_id="seller-1")
    second = make_product(seller_id="seller-2")
    order_id = place_order(
        buyer_id="buyer-1",
        address_id="addr-1",
        lines=[{"product_id": first, "quantity": 1}, {"product_id": second, "quantity": 2}],
    )["order_id"]
    for seller_id, note in (("seller-1", "one"), ("seller-2", "two")):
        current_domain.process(SaveAdminNote(order_id=order_id, seller_id=seller_id, note=note), asynchronous=False)
    return current_domain.repository_for(Order).get(order_id)


class TestViewFor:
    def test_seller_sees_only_own_note(self, order):
        view = view_for(order, SELLER_2)
        assert [note["note"] for note in view["admin_notes"]] == ["two"]
        assert len(view["lines"]) == 2

    def test_buyer_sees_no_notes(self, order):
        view = view_for(order, BUYER)
        assert view["admin_notes"] == []
        assert view["buyer_id"] == "buyer-1"

    def test_unrelated_caller_is_forbidden(self, order):
        with pytest.raises(Forbidden):
            view_for(order, Caller(user_id="seller-3", role=Role.SELLER))
        with pytest.raises(Forbidden):
            view_for(order, Caller(user_id="buyer-2", role=Role.BUYER))


class TestSellerOrders:
    def test_lists_orders_holding_seller_lines(self, order, make_product):
        other = make_product(seller_id="seller-9")
        place_order(buyer_id="buyer-2", address_id="addr-2", lines=[{"product_id": other, "quantity": 1}])

        views = seller_orders("seller-1")
        assert [view["order_id"] for view in views] == [str(order.id)]
        assert views[0]["admin_notes"][0]["note"] == "one"

    def test_newest_first(self, order, make_product):
        product_id = make_product(seller_id="seller-1")
        newer = place_order(buyer_id="buyer-3", address_id="addr-3", lines=[{"product_id": product_id, "quantity": 1}])

        views = seller_orders("seller-1")
        assert [view["order_id"] for view in views] == [newer["order_id"], str(order.id)]

    def test_seller_without_orders(self):
        assert seller_orders("seller-0") == []
