"""Buyer special requests and seller invoices: commands and handler."""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.media import discard_media
from storefront.ordering.order.order import Order


@storefront.command(part_of="Order")
class UpdateSpecialRequest:
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    special_request = Text()


@storefront.command(part_of="Order")
class AttachInvoice:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    invoice_url = Text(required=True)


@storefront.command(part_of="Order")
class RemoveInvoice:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class OrderDocumentsHandler:
    @handle(UpdateSpecialRequest)
    def update_special_request(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_special_request(command.buyer_id, command.special_request)
        repo.add(order)

    @handle(AttachInvoice)
    def attach_invoice(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.attach_invoice(command.seller_id, command.invoice_url)
        repo.add(order)

    @handle(RemoveInvoice)
    def remove_invoice(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.remove_invoice(command.seller_id)
        if previous is None:
            return
        repo.add(order)
        discard_media([previous], order_id=str(order.id))
