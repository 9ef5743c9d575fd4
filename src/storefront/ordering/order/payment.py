"""Payment recording: commands issued by the payment flow, not by sellers."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order


@storefront.command(part_of="Order")
class RecordGatewayOrder:
    order_id = Identifier(required=True)
    gateway_order_id = String(required=True, max_length=100)


@storefront.command(part_of="Order")
class RecordVerifiedPayment:
    order_id = Identifier(required=True)
    gateway_payment_id = String(required=True, max_length=100)


@storefront.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(RecordGatewayOrder)
    def record_gateway_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_gateway_order(command.gateway_order_id)
        repo.add(order)

    @handle(RecordVerifiedPayment)
    def record_verified_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_verified_payment(command.gateway_payment_id)
        repo.add(order)
