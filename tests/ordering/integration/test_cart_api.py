"""Integration tests for the cart endpoints via TestClient."""

from urllib.parse import quote

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from storefront.catalogue.product.product import Product
from storefront.ordering.api import cart_router
from storefront.shared.exception_handlers import register_exception_handlers

BUYER = {"X-User-Id": "buyer-1", "X-User-Role": "buyer"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    register_exception_handlers(app)
    return TestClient(app)


def _option(product_id, group, label):
    catalog = current_domain.repository_for(Product).get(product_id).catalog()
    return catalog.group(group).find(label=label).snapshot()


class TestCartApi:
    def test_cart_requires_identity(self, client):
        assert client.get("/cart").status_code == 401

    def test_empty_cart(self, client):
        response = client.get("/cart", headers=BUYER)
        assert response.status_code == 200
        assert response.json()["lines"] == []
        assert response.json()["total"] == 0.0

    def test_add_line_returns_key_and_summary(self, client, make_product):
        product_id = make_product(price=40.0)
        response = client.post("/cart/lines", json={"product_id": product_id}, headers=BUYER)
        assert response.status_code == 200
        data = response.json()
        assert data["key"] == product_id
        assert data["total"] == 40.0
        assert data["lines"][0]["quantity"] == 1

    def test_add_beyond_stock_is_a_conflict(self, client, make_product):
        product_id = make_product(name="Rare", stock_quantity=1)
        client.post("/cart/lines", json={"product_id": product_id}, headers=BUYER)
        response = client.post("/cart/lines", json={"product_id": product_id}, headers=BUYER)
        assert response.status_code == 409
        assert response.json() == {"error": "Only 1 left for Rare", "available": 1}

    def test_add_without_required_colour_is_a_bad_request(self, client, make_product):
        product_id = make_product(colors=[{"label": "Red"}])
        response = client.post("/cart/lines", json={"product_id": product_id}, headers=BUYER)
        assert response.status_code == 400

    def test_add_unknown_product_is_not_found(self, client):
        response = client.post("/cart/lines", json={"product_id": "nope"}, headers=BUYER)
        assert response.status_code == 404

    def test_set_quantity_on_composite_key(self, client, make_product):
        product_id = make_product(
            price=10.0,
            min_buy=2,
            variants=[{"name": "Size", "options": [{"label": "XL", "priceDelta": 5}]}],
        )
        selection = {"Size": _option(product_id, "Size", "XL")}
        key = client.post(
            "/cart/lines", json={"product_id": product_id, "selection": selection}, headers=BUYER
        ).json()["key"]

        response = client.put(f"/cart/lines/{quote(key, safe='')}", json={"quantity": 1}, headers=BUYER)
        assert response.status_code == 200
        data = response.json()
        assert data["quantity"] == 2
        assert data["total"] == 30.0

    def test_set_zero_removes_line(self, client, make_product):
        product_id = make_product()
        client.post("/cart/lines", json={"product_id": product_id}, headers=BUYER)
        response = client.put(f"/cart/lines/{product_id}", json={"quantity": 0}, headers=BUYER)
        assert response.json()["lines"] == []
