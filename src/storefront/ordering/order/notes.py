"""Private seller notes on an order: commands and handler."""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order


@storefront.command(part_of="Order")
class SaveAdminNote:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    note = Text(required=True)


@storefront.command(part_of="Order")
class DeleteAdminNote:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class AdminNoteHandler:
    # Any seller may note any order, including ones they hold no line in
    @handle(SaveAdminNote)
    def save_note(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.save_note(command.seller_id, command.note)
        repo.add(order)

    @handle(DeleteAdminNote)
    def delete_note(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.delete_note(command.seller_id):
            repo.add(order)
