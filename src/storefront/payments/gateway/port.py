"""Payment gateway port (abstract interface).

The storefront talks to its gateway for two things: opening a
gateway-side order before the buyer pays, and confirming a payment the
buyer reports as completed. ``FakeGateway`` serves development and tests;
``RazorpayGateway`` talks to the real REST API.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass

# Gateway payment states that count as money received
SETTLED_STATUSES = frozenset({"captured", "authorized"})


@dataclass(frozen=True)
class GatewayOrderResult:
    success: bool
    gateway_order_id: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class PaymentLookup:
    payment_id: str
    status: str
    gateway_order_id: str | None = None

    @property
    def settled(self) -> bool:
        return self.status in SETTLED_STATUSES


def sign_payment(secret: str, gateway_order_id: str, payment_id: str) -> str:
    """Hex HMAC-SHA256 of ``gateway_order_id|payment_id``, as the checkout widget returns it."""
    message = f"{gateway_order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


class PaymentGateway(ABC):
    @property
    @abstractmethod
    def key_secret(self) -> str:
        """Shared secret used to sign checkout callbacks."""
        ...

    @abstractmethod
    def create_order(self, amount_minor: int, currency: str, receipt: str) -> GatewayOrderResult:
        """Open a gateway-side order for ``amount_minor`` (paise, cents)."""
        ...

    @abstractmethod
    def fetch_payment(self, payment_id: str) -> PaymentLookup:
        """Look a payment up. Raises ``UpstreamPaymentError`` when the gateway cannot answer."""
        ...

    def verify_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        expected = sign_payment(self.key_secret, gateway_order_id, payment_id)
        return hmac.compare_digest(expected, signature or "")
