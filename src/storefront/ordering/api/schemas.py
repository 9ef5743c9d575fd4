"""Pydantic request/response schemas for the cart and order API.

These are external contracts, kept apart from the protean commands.
"""

from typing import Any

from pydantic import BaseModel, Field

from storefront.ordering.order.order import PaymentMethod


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddCartLineRequest(BaseModel):
    product_id: str
    selection: dict[str, Any] | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "selection": {
                        "Size": {"id": "a1b2c3", "label": "Max", "priceDelta": 20, "color": "Blue"},
                        "_productColor": {"label": "Blue"},
                    },
                }
            ]
        }
    }


class SetCartLineQuantityRequest(BaseModel):
    quantity: int


class CartLineResponse(BaseModel):
    key: str
    product_id: str
    selection: dict[str, Any] | None = None
    quantity: int
    unit_price: float | None = None
    available: bool


class CartResponse(BaseModel):
    buyer_id: str
    lines: list[CartLineResponse]
    total: float
    key: str | None = None
    quantity: int | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    product_id: str | None = None
    key: str | None = None
    quantity: int
    selection: dict[str, Any] | None = None


class PlaceOrderRequest(BaseModel):
    address_id: str
    lines: list[OrderLineRequest] = Field(min_length=1)
    special_request: str | None = None
    payment_method: PaymentMethod = PaymentMethod.COD


class PlaceOrderResponse(BaseModel):
    order_id: str
    total_amount: float
    gateway_order_id: str | None = None


class SellerUpdateRequest(BaseModel):
    status: str | None = None
    payment_status: str | None = None
    cancellation_reason: str | None = None
    refund_reason: str | None = None
    tracking_link: str | None = None
    product_id: str | None = None
    order_tracking_link: str | None = None


class NoteRequest(BaseModel):
    note: str = Field(min_length=1)


class SpecialRequestRequest(BaseModel):
    special_request: str | None = None


class InvoiceRequest(BaseModel):
    invoice_url: str = Field(min_length=1)
