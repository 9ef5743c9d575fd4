"""Seller edits to a shared order: command and handler.

One command carries every field a seller may touch; only the fields that
are present are applied. Authorization is checked per field by the
aggregate: any owning seller for shared fields, the line's own seller for
line tracking.
"""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderBySeller:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    status = String(max_length=50)
    payment_status = String(max_length=50)
    cancellation_reason = Text()
    refund_reason = Text()
    tracking_link = Text()
    product_id = Identifier()  # line addressed by tracking_link
    order_tracking_link = Text()


@storefront.command_handler(part_of=Order)
class UpdateOrderBySellerHandler:
    @handle(UpdateOrderBySeller)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.assert_managed_by(command.seller_id)

        if command.status:
            order.change_status(command.seller_id, command.status, cancellation_reason=command.cancellation_reason)
        elif command.cancellation_reason is not None:
            order.record_cancellation_reason(command.seller_id, command.cancellation_reason)

        if command.payment_status:
            order.change_payment_status(command.seller_id, command.payment_status, refund_reason=command.refund_reason)
        elif command.refund_reason is not None:
            order.record_refund_reason(command.seller_id, command.refund_reason)

        if command.tracking_link is not None:
            order.set_line_tracking(command.seller_id, command.product_id, command.tracking_link)

        if command.order_tracking_link is not None:
            order.set_order_tracking(command.seller_id, command.order_tracking_link)

        repo.add(order)
        logger.info(
            "Order updated by seller",
            order_id=str(order.id),
            seller_id=str(command.seller_id),
            status=order.status,
            payment_status=order.payment_status,
        )
