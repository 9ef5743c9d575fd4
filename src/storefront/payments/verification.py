"""Confirming a payment the buyer reports as completed.

The checkout widget hands the buyer a signature over
``gateway_order_id|payment_id``. When it matches, the payment is accepted.
When it does not, the gateway is asked directly and a captured or
authorized payment is accepted anyway, unless the gateway files it under a
different gateway order. An unreachable gateway is retried
once before the error reaches the caller.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.ordering.order.payment import RecordVerifiedPayment
from storefront.payments.gateway import get_gateway
from storefront.payments.gateway.port import PaymentGateway, PaymentLookup
from storefront.shared.errors import UpstreamPaymentError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    accepted: bool
    reason: str


class PaymentVerifier:
    def __init__(self, gateway: PaymentGateway | None = None, lookup_attempts: int = 2) -> None:
        self.gateway = gateway or get_gateway()
        self.lookup_attempts = lookup_attempts

    def _lookup(self, payment_id: str) -> PaymentLookup:
        for attempt in range(1, self.lookup_attempts + 1):
            try:
                return self.gateway.fetch_payment(payment_id)
            except UpstreamPaymentError as exc:
                if attempt == self.lookup_attempts:
                    raise
                logger.warning("Payment lookup failed, retrying", payment_id=payment_id, error=exc.message)

    def check(self, gateway_order_id: str, payment_id: str, signature: str) -> VerificationResult:
        """Decide whether the payment is genuine, without touching the order."""
        if self.gateway.verify_signature(gateway_order_id, payment_id, signature):
            return VerificationResult(accepted=True, reason="signature")

        lookup = self._lookup(payment_id)
        if lookup.gateway_order_id and lookup.gateway_order_id != gateway_order_id:
            logger.warning(
                "Payment belongs to another gateway order",
                payment_id=payment_id,
                expected=gateway_order_id,
                actual=lookup.gateway_order_id,
            )
            return VerificationResult(accepted=False, reason="payment belongs to another gateway order")
        if lookup.settled:
            logger.info("Signature mismatch, accepted on gateway status", payment_id=payment_id, status=lookup.status)
            return VerificationResult(accepted=True, reason=f"gateway status {lookup.status}")
        return VerificationResult(accepted=False, reason=f"signature mismatch, gateway status {lookup.status}")

    def verify(self, order_id: str, gateway_order_id: str, payment_id: str, signature: str) -> VerificationResult:
        result = self.check(gateway_order_id, payment_id, signature)
        if result.accepted:
            current_domain.process(
                RecordVerifiedPayment(order_id=order_id, gateway_payment_id=payment_id),
                asynchronous=False,
            )
        logger.info(
            "Payment verification",
            order_id=order_id,
            payment_id=payment_id,
            accepted=result.accepted,
            reason=result.reason,
        )
        return result
