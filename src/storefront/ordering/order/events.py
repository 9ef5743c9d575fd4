"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A buyer placed an order; stock for every line has been taken."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    total_amount = Float(required=True)
    line_count = Integer(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    changed_by = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    cancellation_reason = Text()


@storefront.event(part_of="Order")
class PaymentStatusChanged:
    """Payment status moved, either by a seller or by a verified gateway callback."""

    __version__ = 1

    order_id = Identifier(required=True)
    changed_by = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    refund_reason = Text()
    gateway_payment_id = String()


@storefront.event(part_of="Order")
class LineTrackingUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    tracking_link = Text(required=True)


@storefront.event(part_of="Order")
class OrderTrackingUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    tracking_link = Text(required=True)


@storefront.event(part_of="Order")
class AdminNoteSaved:
    __version__ = 1

    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)


@storefront.event(part_of="Order")
class AdminNoteDeleted:
    __version__ = 1

    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)


@storefront.event(part_of="Order")
class SpecialRequestUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)


@storefront.event(part_of="Order")
class InvoiceAttached:
    __version__ = 1

    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    invoice_url = Text(required=True)


@storefront.event(part_of="Order")
class InvoiceRemoved:
    __version__ = 1

    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    invoice_url = Text(required=True)


@storefront.event(part_of="Order")
class GatewayOrderRecorded:
    """The payment gateway accepted the order and issued its own order id."""

    __version__ = 1

    order_id = Identifier(required=True)
    gateway_order_id = String(required=True)
