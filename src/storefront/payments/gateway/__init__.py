"""Payment gateway factory.

get_gateway() builds the adapter named by ``PAYMENT_GATEWAY`` on first use:
``razorpay`` reads ``RAZORPAY_KEY_ID``, ``RAZORPAY_KEY_SECRET`` and the
optional ``RAZORPAY_API_URL``; anything else gives the FakeGateway.
set_gateway() / reset_gateway() swap it (useful for tests).
"""

import os

from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.gateway.port import PaymentGateway
from storefront.payments.gateway.razorpay_adapter import DEFAULT_API_URL, RazorpayGateway

_current_gateway: PaymentGateway | None = None


def gateway_from_env() -> PaymentGateway:
    if os.getenv("PAYMENT_GATEWAY", "fake").strip().lower() == "razorpay":
        key_id = os.getenv("RAZORPAY_KEY_ID")
        key_secret = os.getenv("RAZORPAY_KEY_SECRET")
        if not key_id or not key_secret:
            raise RuntimeError("RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET must be set for the razorpay gateway")
        return RazorpayGateway(key_id, key_secret, api_url=os.getenv("RAZORPAY_API_URL", DEFAULT_API_URL))
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = gateway_from_env()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
