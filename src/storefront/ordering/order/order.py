"""Order aggregate: one buyer, lines from any number of sellers.

An order is shared between the sellers whose products it contains. Shared
fields (status, payment status, reasons, invoice, order-level tracking) may
be edited by any of those sellers; per-line tracking only by the seller who
owns that line's product; each seller's admin note only by that seller.

Status flow (enforced only in strict mode, see ``transitions``):
    Order Placed → pending / confirmed / shipped / delivered / cancelled /
    return_assigned / replace_assigned
    return_assigned → returned_completed
    replace_assigned → replace_completed

Payment flow: pending → paid / failed; paid / failed → refunded.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.catalogue.pricing import floor_cents
from storefront.domain import storefront
from storefront.ordering.order.events import (
    AdminNoteDeleted,
    AdminNoteSaved,
    GatewayOrderRecorded,
    InvoiceAttached,
    InvoiceRemoved,
    LineTrackingUpdated,
    OrderPlaced,
    OrderStatusChanged,
    OrderTrackingUpdated,
    PaymentStatusChanged,
    SpecialRequestUpdated,
)
from storefront.ordering.order.transitions import OrderStatus, PaymentStatus, TransitionPolicy, get_policy
from storefront.shared.errors import Forbidden

HANDLING_SURCHARGE = Decimal("1.02")

# changed_by marker for updates that arrive from the payment gateway
GATEWAY_ACTOR = "payment-gateway"


class PaymentMethod(Enum):
    COD = "cod"
    RAZORPAY = "razorpay"


def charged_total(lines) -> Decimal:
    """Sum of unit price times quantity plus the 2% handling surcharge, floored to the cent."""
    subtotal = sum((Decimal(str(line["unit_price"])) * line["quantity"] for line in lines), Decimal("0"))
    return floor_cents(subtotal * HANDLING_SURCHARGE)


@storefront.entity(part_of="Order")
class OrderLine:
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    selection = Text()  # JSON snapshot of the chosen options
    tracking_link = Text()
    tracking_updated_at = DateTime()


@storefront.entity(part_of="Order")
class AdminNote:
    seller_id = Identifier(required=True)
    note = Text(required=True)
    updated_at = DateTime()


@storefront.aggregate
class Order:
    buyer_id = Identifier(required=True)
    lines = HasMany(OrderLine)
    total_amount = Float(required=True, min_value=0.0)
    address_id = Identifier(required=True)
    special_request = Text()
    status = String(choices=OrderStatus, default=OrderStatus.ORDER_PLACED.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    cancellation_reason = Text()
    refund_reason = Text()
    refund_date = DateTime()
    invoice_url = Text()
    tracking_link = Text()
    gateway_order_id = String(max_length=100)
    gateway_payment_id = String(max_length=100)
    admin_notes = HasMany(AdminNote)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_admin_note_per_seller(self):
        sellers = [str(note.seller_id) for note in self.admin_notes]
        if len(sellers) != len(set(sellers)):
            raise ValidationError({"admin_notes": ["A seller can hold only one note per order"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, buyer_id, address_id, lines, special_request=None, payment_method=None):
        """Create an order from priced lines.

        Each line is a dict with product_id, seller_id, product_name,
        quantity, unit_price and an optional selection dict. The total is
        fixed here and never recomputed.
        """
        now = datetime.now(UTC)
        method = payment_method or PaymentMethod.COD.value

        order = cls(
            buyer_id=buyer_id,
            address_id=address_id,
            special_request=special_request,
            total_amount=float(charged_total(lines)),
            status=OrderStatus.ORDER_PLACED.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_method=method,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_lines(
                OrderLine(
                    product_id=line["product_id"],
                    seller_id=line["seller_id"],
                    product_name=line["product_name"],
                    quantity=line["quantity"],
                    unit_price=float(line["unit_price"]),
                    selection=json.dumps(line["selection"]) if line.get("selection") else None,
                )
            )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                buyer_id=buyer_id,
                total_amount=order.total_amount,
                line_count=len(lines),
                payment_method=method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------
    @property
    def seller_ids(self) -> set[str]:
        return {str(line.seller_id) for line in self.lines}

    def is_managed_by(self, seller_id) -> bool:
        return str(seller_id) in self.seller_ids

    def assert_managed_by(self, seller_id):
        if not self.is_managed_by(seller_id):
            raise Forbidden("You do not own any product in this order")

    def assert_bought_by(self, buyer_id):
        if str(self.buyer_id) != str(buyer_id):
            raise Forbidden("This order belongs to another buyer")

    def line_for(self, product_id) -> OrderLine | None:
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Seller updates
    # -------------------------------------------------------------------
    def change_status(self, seller_id, status, cancellation_reason=None, policy: TransitionPolicy | None = None):
        self.assert_managed_by(seller_id)
        previous = self.status
        target = (policy or get_policy()).check_status(previous, status)

        self.status = target.value
        if cancellation_reason is not None:
            self.cancellation_reason = cancellation_reason
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                changed_by=seller_id,
                previous_status=previous,
                new_status=self.status,
                cancellation_reason=self.cancellation_reason,
            )
        )

    def change_payment_status(self, seller_id, payment_status, refund_reason=None, policy=None):
        self.assert_managed_by(seller_id)
        target = (policy or get_policy()).check_payment(self.payment_status, payment_status)
        if refund_reason is not None:
            self.refund_reason = refund_reason
        self._move_payment(target, changed_by=seller_id)

    def _move_payment(self, target: PaymentStatus, changed_by, gateway_payment_id=None):
        previous = self.payment_status
        now = datetime.now(UTC)

        self.payment_status = target.value
        # refund_date records the first refund only
        if target == PaymentStatus.REFUNDED and self.refund_date is None:
            self.refund_date = now
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=self.id,
                changed_by=changed_by,
                previous_status=previous,
                new_status=self.payment_status,
                refund_reason=self.refund_reason,
                gateway_payment_id=gateway_payment_id,
            )
        )

    def record_cancellation_reason(self, seller_id, reason):
        self.assert_managed_by(seller_id)
        self.cancellation_reason = reason
        self.updated_at = datetime.now(UTC)

    def record_refund_reason(self, seller_id, reason):
        self.assert_managed_by(seller_id)
        self.refund_reason = reason
        self.updated_at = datetime.now(UTC)

    def set_line_tracking(self, seller_id, product_id, tracking_link):
        """Set the tracking link of the line holding ``product_id``.

        Lines are addressed by product id, so a product that appears on two
        lines only has its first line updated.
        """
        self.assert_managed_by(seller_id)
        if not product_id:
            raise ValidationError({"product_id": ["product_id is required to set a tracking link"]})
        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["Product not part of the order"]})
        if str(line.seller_id) != str(seller_id):
            raise Forbidden("You can only track your own products")

        now = datetime.now(UTC)
        line.tracking_link = tracking_link
        line.tracking_updated_at = now
        self.updated_at = now

        self.raise_(
            LineTrackingUpdated(
                order_id=self.id,
                product_id=product_id,
                seller_id=seller_id,
                tracking_link=tracking_link,
            )
        )

    def set_order_tracking(self, seller_id, tracking_link):
        self.assert_managed_by(seller_id)
        self.tracking_link = tracking_link
        self.updated_at = datetime.now(UTC)
        self.raise_(OrderTrackingUpdated(order_id=self.id, seller_id=seller_id, tracking_link=tracking_link))

    # -------------------------------------------------------------------
    # Admin notes (one private note per seller)
    # -------------------------------------------------------------------
    def note_for(self, seller_id) -> AdminNote | None:
        return next((note for note in self.admin_notes if str(note.seller_id) == str(seller_id)), None)

    def save_note(self, seller_id, text):
        if not text or not text.strip():
            raise ValidationError({"note": ["Note cannot be empty"]})

        now = datetime.now(UTC)
        existing = self.note_for(seller_id)
        if existing:
            existing.note = text
            existing.updated_at = now
        else:
            self.add_admin_notes(AdminNote(seller_id=seller_id, note=text, updated_at=now))
        self.updated_at = now

        self.raise_(AdminNoteSaved(order_id=self.id, seller_id=seller_id))

    def delete_note(self, seller_id) -> bool:
        existing = self.note_for(seller_id)
        if existing is None:
            return False

        self.remove_admin_notes(existing)
        self.updated_at = datetime.now(UTC)
        self.raise_(AdminNoteDeleted(order_id=self.id, seller_id=seller_id))
        return True

    # -------------------------------------------------------------------
    # Buyer updates
    # -------------------------------------------------------------------
    def update_special_request(self, buyer_id, text):
        self.assert_bought_by(buyer_id)
        self.special_request = text
        self.updated_at = datetime.now(UTC)
        self.raise_(SpecialRequestUpdated(order_id=self.id, buyer_id=buyer_id))

    # -------------------------------------------------------------------
    # Invoice
    # -------------------------------------------------------------------
    def attach_invoice(self, seller_id, invoice_url):
        self.assert_managed_by(seller_id)
        self.invoice_url = invoice_url
        self.updated_at = datetime.now(UTC)
        self.raise_(InvoiceAttached(order_id=self.id, seller_id=seller_id, invoice_url=invoice_url))

    def remove_invoice(self, seller_id) -> str | None:
        """Clear the invoice and return the reference that was attached, if any."""
        self.assert_managed_by(seller_id)
        previous = self.invoice_url
        if not previous:
            return None

        self.invoice_url = None
        self.updated_at = datetime.now(UTC)
        self.raise_(InvoiceRemoved(order_id=self.id, seller_id=seller_id, invoice_url=previous))
        return previous

    # -------------------------------------------------------------------
    # Payment gateway
    # -------------------------------------------------------------------
    def record_gateway_order(self, gateway_order_id):
        self.gateway_order_id = gateway_order_id
        self.updated_at = datetime.now(UTC)
        self.raise_(GatewayOrderRecorded(order_id=self.id, gateway_order_id=gateway_order_id))

    def record_verified_payment(self, gateway_payment_id):
        """Mark the order paid after the gateway confirmed the payment.

        This path needs no seller; it is driven by the buyer's verified
        gateway callback. A refunded order is never moved back to paid.
        """
        if PaymentStatus(self.payment_status) == PaymentStatus.REFUNDED:
            raise ValidationError({"payment_status": ["Order has already been refunded"]})

        self.gateway_payment_id = gateway_payment_id
        if PaymentStatus(self.payment_status) == PaymentStatus.PAID:
            self.updated_at = datetime.now(UTC)
            return
        self._move_payment(PaymentStatus.PAID, changed_by=GATEWAY_ACTOR, gateway_payment_id=gateway_payment_id)
