"""Pydantic request/response schemas for payment verification."""

from pydantic import BaseModel


class VerifyPaymentRequest(BaseModel):
    gateway_order_id: str
    payment_id: str
    signature: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "gateway_order_id": "order_NX1abc",
                    "payment_id": "pay_NX1def",
                    "signature": "9b5b0c1e...",
                }
            ]
        }
    }


class VerifyPaymentResponse(BaseModel):
    accepted: bool
    reason: str
