"""Read models of an order, shaped for the caller looking at it.

Buyers never see admin notes; a seller sees only the note they wrote.
"""

import json

from protean.utils.globals import current_domain

from storefront.ordering.order.order import Order
from storefront.shared.caller import Caller
from storefront.shared.errors import Forbidden


def _iso(value):
    return value.isoformat() if value else None


def _line_view(line) -> dict:
    return {
        "product_id": str(line.product_id),
        "seller_id": str(line.seller_id),
        "product_name": line.product_name,
        "quantity": line.quantity,
        "unit_price": line.unit_price,
        "selection": json.loads(line.selection) if line.selection else None,
        "tracking_link": line.tracking_link,
        "tracking_updated_at": _iso(line.tracking_updated_at),
    }


def order_view(order: Order, seller_id=None) -> dict:
    notes = []
    if seller_id is not None:
        note = order.note_for(seller_id)
        if note is not None:
            notes.append({"seller_id": str(note.seller_id), "note": note.note, "updated_at": _iso(note.updated_at)})

    return {
        "order_id": str(order.id),
        "buyer_id": str(order.buyer_id),
        "address_id": str(order.address_id),
        "lines": [_line_view(line) for line in order.lines],
        "total_amount": order.total_amount,
        "special_request": order.special_request,
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "cancellation_reason": order.cancellation_reason,
        "refund_reason": order.refund_reason,
        "refund_date": _iso(order.refund_date),
        "invoice_url": order.invoice_url,
        "tracking_link": order.tracking_link,
        "gateway_order_id": order.gateway_order_id,
        "gateway_payment_id": order.gateway_payment_id,
        "admin_notes": notes,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }


def view_for(order: Order, caller: Caller) -> dict:
    if caller.is_seller and order.is_managed_by(caller.user_id):
        return order_view(order, seller_id=caller.user_id)
    if str(order.buyer_id) == caller.user_id:
        return order_view(order)
    raise Forbidden("You cannot view this order")


def seller_orders(seller_id) -> list[dict]:
    """Orders holding at least one line of ``seller_id``, newest first."""
    orders = current_domain.repository_for(Order)._dao.query.all().items
    mine = [order for order in orders if order.is_managed_by(seller_id)]
    mine.sort(key=lambda order: order.created_at, reverse=True)
    return [order_view(order, seller_id=seller_id) for order in mine]
