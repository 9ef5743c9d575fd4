"""Application tests for seller updates, admin notes, special requests and invoices."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.ordering.order.documents import AttachInvoice, RemoveInvoice, UpdateSpecialRequest
from storefront.ordering.order.notes import DeleteAdminNote, SaveAdminNote
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import place_order
from storefront.ordering.order.seller_updates import UpdateOrderBySeller
from storefront.ordering.order.transitions import TransitionPolicy, set_policy
from storefront.shared.errors import Forbidden


@pytest.fixture
def order_id(make_product):
    first = make_product(seller_id="seller-1", name="Kettle")
    second = make_product(seller_id="seller-2", name="Teapot")
    result = place_order(
        buyer_id="buyer-1",
        address_id="addr-1",
        lines=[{"product_id": first, "quantity": 1}, {"product_id": second, "quantity": 1}],
    )
    return result["order_id"]


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


def _product_of(order_id, seller_id):
    return next(str(line.product_id) for line in _order(order_id).lines if str(line.seller_id) == seller_id)


def _update(order_id, seller_id="seller-1", **fields):
    current_domain.process(UpdateOrderBySeller(order_id=order_id, seller_id=seller_id, **fields), asynchronous=False)


class TestSellerUpdates:
    def test_status_and_payment_update(self, order_id):
        _update(order_id, status="shipped", payment_status="paid")
        order = _order(order_id)
        assert order.status == "shipped"
        assert order.payment_status == "paid"

    def test_second_seller_edits_shared_fields(self, order_id):
        _update(order_id, seller_id="seller-2", status="cancelled", cancellation_reason="Out of season")
        order = _order(order_id)
        assert order.status == "cancelled"
        assert order.cancellation_reason == "Out of season"

    def test_reasons_without_status_change(self, order_id):
        _update(order_id, refund_reason="Late delivery")
        assert _order(order_id).refund_reason == "Late delivery"
        assert _order(order_id).payment_status == "pending"

    def test_refund_records_date(self, order_id):
        _update(order_id, payment_status="refunded", refund_reason="Damaged")
        order = _order(order_id)
        assert order.refund_date is not None
        assert order.refund_reason == "Damaged"

    def test_stranger_is_forbidden(self, order_id):
        with pytest.raises(Forbidden):
            _update(order_id, seller_id="seller-3", status="shipped")
        assert _order(order_id).status == "Order Placed"

    def test_strict_policy_rejects_illegal_move(self, order_id):
        set_policy(TransitionPolicy(strict=True))
        _update(order_id, status="cancelled")
        with pytest.raises(ValidationError):
            _update(order_id, status="delivered")
        assert _order(order_id).status == "cancelled"

    def test_unknown_order_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            _update("missing-order", status="shipped")


class TestTrackingUpdates:
    def test_seller_tracks_own_line(self, order_id):
        product_id = _product_of(order_id, "seller-2")
        _update(order_id, seller_id="seller-2", tracking_link="https://track.example/t", product_id=product_id)
        line = _order(order_id).line_for(product_id)
        assert line.tracking_link == "https://track.example/t"

    def test_seller_cannot_track_other_sellers_line(self, order_id):
        product_id = _product_of(order_id, "seller-2")
        with pytest.raises(Forbidden):
            _update(order_id, seller_id="seller-1", tracking_link="https://track.example/t", product_id=product_id)

    def test_tracking_link_needs_product(self, order_id):
        with pytest.raises(ValidationError):
            _update(order_id, tracking_link="https://track.example/t")

    def test_order_level_tracking(self, order_id):
        _update(order_id, seller_id="seller-2", order_tracking_link="https://track.example/o")
        assert _order(order_id).tracking_link == "https://track.example/o"


class TestAdminNotes:
    def _save(self, order_id, seller_id, note):
        current_domain.process(SaveAdminNote(order_id=order_id, seller_id=seller_id, note=note), asynchronous=False)

    def test_notes_are_kept_per_seller(self, order_id):
        self._save(order_id, "seller-1", "Fragile")
        self._save(order_id, "seller-2", "Gift")
        self._save(order_id, "seller-1", "Very fragile")
        order = _order(order_id)
        assert len(order.admin_notes) == 2
        assert order.note_for("seller-1").note == "Very fragile"

    def test_delete_note(self, order_id):
        self._save(order_id, "seller-1", "Fragile")
        current_domain.process(DeleteAdminNote(order_id=order_id, seller_id="seller-1"), asynchronous=False)
        assert _order(order_id).note_for("seller-1") is None

    def test_deleting_a_missing_note_is_harmless(self, order_id):
        current_domain.process(DeleteAdminNote(order_id=order_id, seller_id="seller-2"), asynchronous=False)
        assert len(_order(order_id).admin_notes) == 0


class TestSpecialRequest:
    def test_buyer_updates_special_request(self, order_id):
        current_domain.process(
            UpdateSpecialRequest(order_id=order_id, buyer_id="buyer-1", special_request="Call first"),
            asynchronous=False,
        )
        assert _order(order_id).special_request == "Call first"

    def test_other_buyer_is_forbidden(self, order_id):
        with pytest.raises(Forbidden):
            current_domain.process(
                UpdateSpecialRequest(order_id=order_id, buyer_id="buyer-2", special_request="Call first"),
                asynchronous=False,
            )


class TestInvoice:
    def _attach(self, order_id, seller_id="seller-1", ref="invoices/42.pdf"):
        current_domain.process(AttachInvoice(order_id=order_id, seller_id=seller_id, invoice_url=ref), asynchronous=False)

    def test_attach_invoice(self, order_id):
        self._attach(order_id)
        assert _order(order_id).invoice_url == "invoices/42.pdf"

    def test_remove_invoice_deletes_media(self, order_id, media_store):
        self._attach(order_id)
        current_domain.process(RemoveInvoice(order_id=order_id, seller_id="seller-2"), asynchronous=False)
        assert _order(order_id).invoice_url is None
        assert media_store.deleted == ["invoices/42.pdf"]

    def test_media_failure_still_clears_invoice(self, order_id, media_store):
        self._attach(order_id)
        media_store.configure(should_succeed=False)
        current_domain.process(RemoveInvoice(order_id=order_id, seller_id="seller-1"), asynchronous=False)
        assert _order(order_id).invoice_url is None
        assert media_store.deleted == []

    def test_removing_without_invoice_touches_no_media(self, order_id, media_store):
        current_domain.process(RemoveInvoice(order_id=order_id, seller_id="seller-1"), asynchronous=False)
        assert media_store.calls == []

    def test_stranger_cannot_attach(self, order_id):
        with pytest.raises(Forbidden):
            self._attach(order_id, seller_id="seller-3")
