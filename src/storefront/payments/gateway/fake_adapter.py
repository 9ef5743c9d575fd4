"""Configurable fake payment gateway for development and testing.

Signs and verifies with a local secret, hands out ``fake_order_*`` ids and
answers payment lookups from a dict tests can populate. It can also be told
to fail order creation or to be unreachable for a number of lookups.
"""

from uuid import uuid4

from storefront.payments.gateway.port import GatewayOrderResult, PaymentGateway, PaymentLookup, sign_payment
from storefront.shared.errors import UpstreamPaymentError


class FakeGateway(PaymentGateway):
    def __init__(self, secret: str = "fake-gateway-secret") -> None:
        self._secret = secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway rejected the order"
        self.payments: dict[str, str] = {}
        self.payment_orders: dict[str, str] = {}
        self.unreachable_lookups: int = 0
        self.calls: list[dict] = []

    @property
    def key_secret(self) -> str:
        return self._secret

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway rejected the order") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def set_payment_status(self, payment_id: str, status: str, gateway_order_id: str | None = None) -> None:
        self.payments[payment_id] = status
        if gateway_order_id:
            self.payment_orders[payment_id] = gateway_order_id

    def sign(self, gateway_order_id: str, payment_id: str) -> str:
        return sign_payment(self._secret, gateway_order_id, payment_id)

    def create_order(self, amount_minor: int, currency: str, receipt: str) -> GatewayOrderResult:
        self.calls.append(
            {"method": "create_order", "amount_minor": amount_minor, "currency": currency, "receipt": receipt}
        )
        if not self.should_succeed:
            return GatewayOrderResult(success=False, failure_reason=self.failure_reason)
        return GatewayOrderResult(success=True, gateway_order_id=f"fake_order_{uuid4().hex[:12]}")

    def fetch_payment(self, payment_id: str) -> PaymentLookup:
        self.calls.append({"method": "fetch_payment", "payment_id": payment_id})
        if self.unreachable_lookups > 0:
            self.unreachable_lookups -= 1
            raise UpstreamPaymentError("Gateway unreachable")
        return PaymentLookup(
            payment_id=payment_id,
            status=self.payments.get(payment_id, "created"),
            gateway_order_id=self.payment_orders.get(payment_id),
        )
