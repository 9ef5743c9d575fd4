"""Tests for payment signatures and the gateway adapters."""

import hashlib
import hmac

import pytest
import requests
from storefront.payments.gateway import gateway_from_env, get_gateway, reset_gateway, set_gateway
from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.gateway.port import PaymentLookup, sign_payment
from storefront.payments.gateway.razorpay_adapter import RazorpayGateway
from storefront.shared.errors import UpstreamPaymentError


class TestSignature:
    def test_signature_is_hmac_of_order_and_payment(self):
        expected = hmac.new(b"secret", b"order_1|pay_1", hashlib.sha256).hexdigest()
        assert sign_payment("secret", "order_1", "pay_1") == expected

    def test_verify_signature(self):
        gateway = FakeGateway(secret="s3cret")
        signature = gateway.sign("order_1", "pay_1")
        assert gateway.verify_signature("order_1", "pay_1", signature)
        assert not gateway.verify_signature("order_1", "pay_2", signature)
        assert not gateway.verify_signature("order_1", "pay_1", "")


class TestPaymentLookup:
    @pytest.mark.parametrize("status", ["captured", "authorized"])
    def test_settled_statuses(self, status):
        assert PaymentLookup(payment_id="pay_1", status=status).settled

    @pytest.mark.parametrize("status", ["created", "failed", "refunded"])
    def test_unsettled_statuses(self, status):
        assert not PaymentLookup(payment_id="pay_1", status=status).settled


class TestFakeGateway:
    def test_create_order_hands_out_ids(self):
        result = FakeGateway().create_order(amount_minor=1000, currency="INR", receipt="r-1")
        assert result.success is True
        assert result.gateway_order_id.startswith("fake_order_")

    def test_configured_failure(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Declined")
        result = gateway.create_order(amount_minor=1000, currency="INR", receipt="r-1")
        assert result.success is False
        assert result.failure_reason == "Declined"

    def test_unknown_payment_is_created(self):
        assert FakeGateway().fetch_payment("pay_9").status == "created"

    def test_unreachable_lookups(self):
        gateway = FakeGateway()
        gateway.unreachable_lookups = 1
        gateway.set_payment_status("pay_1", "captured")
        with pytest.raises(UpstreamPaymentError):
            gateway.fetch_payment("pay_1")
        assert gateway.fetch_payment("pay_1").settled


class _Calls(list):
    response = None


class _Response:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        return self._body


class TestRazorpayGateway:
    @pytest.fixture
    def sent(self, monkeypatch):
        calls = _Calls()

        def fake_request(method, url, **kwargs):
            calls.append({"method": method, "url": url, **kwargs})
            return calls.response

        monkeypatch.setattr(requests, "request", fake_request)
        return calls

    def test_create_order(self, sent):
        sent.response = _Response(200, {"id": "order_rzp_1"})
        gateway = RazorpayGateway("key_id", "key_secret", api_url="https://rzp.test/v1/")

        result = gateway.create_order(amount_minor=20400, currency="INR", receipt="o-1")

        assert result.gateway_order_id == "order_rzp_1"
        call = sent[0]
        assert call["method"] == "POST"
        assert call["url"] == "https://rzp.test/v1/orders"
        assert call["auth"] == ("key_id", "key_secret")
        assert call["json"] == {"amount": 20400, "currency": "INR", "receipt": "o-1"}

    def test_fetch_payment(self, sent):
        sent.response = _Response(200, {"id": "pay_1", "status": "captured", "order_id": "order_rzp_1"})
        lookup = RazorpayGateway("k", "s").fetch_payment("pay_1")
        assert lookup.settled
        assert lookup.gateway_order_id == "order_rzp_1"
        assert sent[0]["url"] == "https://api.razorpay.com/v1/payments/pay_1"

    def test_error_status_raises(self, sent):
        sent.response = _Response(401, {"error": {"description": "bad key"}})
        with pytest.raises(UpstreamPaymentError):
            RazorpayGateway("k", "s").fetch_payment("pay_1")

    def test_network_failure_raises(self, monkeypatch):
        def broken(method, url, **kwargs):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(requests, "request", broken)
        with pytest.raises(UpstreamPaymentError):
            RazorpayGateway("k", "s").create_order(amount_minor=100, currency="INR", receipt="o-1")

    def test_missing_order_id_is_a_failed_result(self, sent):
        sent.response = _Response(200, {})
        result = RazorpayGateway("k", "s").create_order(amount_minor=100, currency="INR", receipt="o-1")
        assert result.success is False


class TestGatewayFactory:
    def test_default_is_fake(self, monkeypatch):
        monkeypatch.delenv("PAYMENT_GATEWAY", raising=False)
        assert isinstance(gateway_from_env(), FakeGateway)

    def test_razorpay_from_env(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "razorpay")
        monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_test")
        monkeypatch.setenv("RAZORPAY_KEY_SECRET", "secret")
        gateway = gateway_from_env()
        assert isinstance(gateway, RazorpayGateway)
        assert gateway.key_secret == "secret"

    def test_razorpay_needs_keys(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "razorpay")
        monkeypatch.delenv("RAZORPAY_KEY_ID", raising=False)
        with pytest.raises(RuntimeError):
            gateway_from_env()

    def test_set_and_reset(self):
        custom = FakeGateway(secret="other")
        set_gateway(custom)
        assert get_gateway() is custom
        reset_gateway()
        assert get_gateway() is not custom
