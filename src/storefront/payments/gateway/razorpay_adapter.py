"""Razorpay REST adapter.

Uses HTTP basic auth with the key id and key secret against
``https://api.razorpay.com/v1``. Amounts are sent in the currency's minor
unit.
"""

import requests

from storefront.payments.gateway.port import GatewayOrderResult, PaymentGateway, PaymentLookup
from storefront.shared.errors import UpstreamPaymentError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.razorpay.com/v1"


class RazorpayGateway(PaymentGateway):
    def __init__(self, key_id: str, key_secret: str, api_url: str = DEFAULT_API_URL, timeout: float = 10.0) -> None:
        self.key_id = key_id
        self._secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @property
    def key_secret(self) -> str:
        return self._secret

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.api_url}{path}"
        try:
            response = requests.request(
                method,
                url,
                auth=(self.key_id, self._secret),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise UpstreamPaymentError(f"Razorpay unreachable: {exc}") from exc

        if response.status_code >= 400:
            logger.warning("Razorpay request failed", url=url, status_code=response.status_code)
            raise UpstreamPaymentError(f"Razorpay answered {response.status_code}")
        return response.json()

    def create_order(self, amount_minor: int, currency: str, receipt: str) -> GatewayOrderResult:
        payload = {"amount": amount_minor, "currency": currency, "receipt": receipt}
        body = self._request("POST", "/orders", json=payload)
        if not body.get("id"):
            return GatewayOrderResult(success=False, failure_reason="Razorpay returned no order id")
        return GatewayOrderResult(success=True, gateway_order_id=body["id"])

    def fetch_payment(self, payment_id: str) -> PaymentLookup:
        body = self._request("GET", f"/payments/{payment_id}")
        return PaymentLookup(
            payment_id=body.get("id", payment_id),
            status=body.get("status", "unknown"),
            gateway_order_id=body.get("order_id"),
        )
