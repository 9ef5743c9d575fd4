"""FastAPI routes for payments."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.ordering.order.order import Order
from storefront.payments.api.schemas import VerifyPaymentRequest, VerifyPaymentResponse
from storefront.payments.verification import PaymentVerifier
from storefront.shared.caller import Caller, current_caller

payment_router = APIRouter(prefix="/orders", tags=["payments"])


@payment_router.post("/{order_id}/payment-verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    order_id: str, body: VerifyPaymentRequest, caller: Caller = Depends(current_caller)
) -> VerifyPaymentResponse:
    """Confirm a payment the buyer completed in the gateway checkout."""
    current_domain.repository_for(Order).get(order_id)

    result = PaymentVerifier().verify(
        order_id=order_id,
        gateway_order_id=body.gateway_order_id,
        payment_id=body.payment_id,
        signature=body.signature,
    )
    return VerifyPaymentResponse(accepted=result.accepted, reason=result.reason)
