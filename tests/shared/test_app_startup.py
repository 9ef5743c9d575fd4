"""The assembled app must register every domain element on its own.

These run in a fresh interpreter so that nothing imported by the test session
hides a module the app itself forgets to load.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[2] / "src"

CHECKOUT_SCRIPT = """
import json

from fastapi.testclient import TestClient

import app

client = TestClient(app.app)
seller = {"X-User-Id": "seller-1", "X-User-Role": "seller"}
buyer = {"X-User-Id": "buyer-1", "X-User-Role": "buyer"}

created = client.post("/products", json={"name": "Kettle", "price": 100, "stock_quantity": 3}, headers=seller)
product_id = created.json().get("product_id")
added = client.post("/cart/lines", json={"product_id": product_id}, headers=buyer)
placed = client.post(
    "/orders",
    json={"address_id": "addr-1", "lines": [{"product_id": product_id, "quantity": 1}]},
    headers=buyer,
)
print(json.dumps([created.status_code, added.status_code, placed.status_code]))
"""

REGISTRY_SCRIPT = """
import json

from storefront.domain import init_storefront

domain = init_storefront()
print(json.dumps(sorted(name.rsplit(".", 1)[-1] for name in domain.registry.commands)))
"""


def _run(script: str) -> str:
    env = dict(os.environ, PROTEAN_ENV="test", PYTHONPATH=str(SRC))
    completed = subprocess.run(
        [sys.executable, "-c", script],
        cwd=SRC,
        env=env,
        capture_output=True,
        text=True,
        timeout=120,
    )
    assert completed.returncode == 0, completed.stderr
    return completed.stdout.strip().splitlines()[-1]


@pytest.mark.slow
class TestFreshStartup:
    def test_init_registers_nested_commands(self):
        commands = json.loads(_run(REGISTRY_SCRIPT))
        for name in ("CreateProduct", "AddCartLine", "PlaceOrder", "UpdateOrderBySeller", "SaveAdminNote"):
            assert name in commands

    def test_product_cart_and_order_endpoints_work(self):
        assert json.loads(_run(CHECKOUT_SCRIPT)) == [201, 200, 201]
