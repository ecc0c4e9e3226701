"""Gateway adapter contract: signatures, mock references, remote failures."""

from types import SimpleNamespace

import pytest
import requests
from razorpay.errors import BadRequestError, ServerError

from shopadmin.config import Settings
from shopadmin.exceptions import GatewayError, NotFoundError, ValidationError
from shopadmin.services.payment_gateway import (
    MockGateway,
    PaymentGateway,
    RazorpayGateway,
    build_payment_gateway,
    is_mock_reference,
)
from tests.helpers import KEY_ID, KEY_SECRET, sign


class FakeOrders:

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def create(self, data, **kwargs):
        self.calls.append((data, kwargs))
        if self.error:
            raise self.error
        return {
            "id": "order_N1x2y3z4",
            "entity": "order",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
            "notes": data["notes"],
            "created_at": 1760000000,
        }


class FakePayments:

    def __init__(self, error=None):
        self.error = error

    def fetch(self, payment_id, **kwargs):
        if self.error:
            raise self.error
        return {"id": payment_id, "status": "captured", "amount": 100000}


def _with_fake_client(gateway, orders=None, payments=None):
    gateway._client = SimpleNamespace(
        order=orders or FakeOrders(),
        payment=payments or FakePayments(),
        utility=gateway._client.utility,
    )
    return gateway


class TestVerifySignature:

    def test_matching_signature(self, razorpay_gateway):
        result = razorpay_gateway.verify_signature("order_A1", "pay_B2", sign("order_A1", "pay_B2"))
        assert result.success
        assert result.to_dict() == {
            "orderId": "order_A1",
            "paymentId": "pay_B2",
            "signature": sign("order_A1", "pay_B2"),
            "isMock": False,
        }

    @pytest.mark.parametrize("signature", [
        sign("order_A1", "pay_XX"),
        sign("order_A1", "pay_B2", secret="other-secret"),
        "not-a-signature",
        "",
    ])
    def test_mismatch_is_a_result_not_an_exception(self, razorpay_gateway, signature):
        result = razorpay_gateway.verify_signature("order_A1", "pay_B2", signature)
        assert not result.success
        assert result.error == "Invalid payment signature"

    def test_mock_gateway_accepts_mock_reference_unconditionally(self, mock_gateway):
        result = mock_gateway.verify_signature("order_mock_1700000000000_abc123def", "", "")
        assert result.success
        assert result.is_mock
        assert result.payment_id.startswith("pay_mock_")
        assert result.signature.startswith("mock_signature_")

    def test_mock_gateway_still_checks_real_references(self, mock_gateway):
        assert mock_gateway.verify_signature("order_A1", "pay_B2", sign("order_A1", "pay_B2")).success
        assert not mock_gateway.verify_signature("order_A1", "pay_B2", "forged").success

    def test_razorpay_gateway_rejects_mock_reference_by_default(self, razorpay_gateway):
        result = razorpay_gateway.verify_signature("order_mock_1_x", "pay_1", "sig")
        assert not result.success

    def test_razorpay_gateway_accepts_mock_reference_when_allowed(self):
        gateway = RazorpayGateway(KEY_ID, KEY_SECRET, allow_mock_payments=True)
        assert gateway.verify_signature("order_mock_1_x", "pay_1", "sig").is_mock


class TestCreateRemoteOrder:

    @pytest.mark.parametrize("amount", [0, -100, 10.5, "100", None, True])
    def test_rejects_non_positive_or_non_integer_amounts(self, mock_gateway, amount):
        with pytest.raises(ValidationError):
            mock_gateway.create_remote_order(amount)

    def test_mock_order_reference(self, mock_gateway):
        order = mock_gateway.create_remote_order(50000, receipt="receipt_1", notes={"cart": "7"})
        assert is_mock_reference(order.id)
        assert order.is_mock
        assert order.amount == 50000
        assert order.currency == "INR"
        assert order.notes == {"cart": "7"}

    def test_razorpay_order_passes_timeout(self, razorpay_gateway):
        orders = FakeOrders()
        gateway = _with_fake_client(razorpay_gateway, orders=orders)

        ref = gateway.create_remote_order(120000, currency="INR", receipt="r1")

        data, kwargs = orders.calls[0]
        assert data == {"amount": 120000, "currency": "INR", "receipt": "r1", "notes": {}}
        assert kwargs == {"timeout": 5}
        assert ref.id == "order_N1x2y3z4"
        assert not ref.is_mock

    @pytest.mark.parametrize("error", [
        BadRequestError("Authentication failed"),
        ServerError("The server encountered an error"),
        requests.Timeout("read timed out"),
    ])
    def test_remote_failure_becomes_gateway_error(self, razorpay_gateway, error):
        gateway = _with_fake_client(razorpay_gateway, orders=FakeOrders(error=error))
        with pytest.raises(GatewayError) as exc:
            gateway.create_remote_order(100)
        assert exc.value.error == str(error)

    def test_placeholder_keys_refuse_to_call_remote(self):
        gateway = RazorpayGateway("rzp_test_YOUR_ACTUAL_KEY_ID", "YOUR_ACTUAL_KEY_SECRET")
        orders = FakeOrders()
        _with_fake_client(gateway, orders=orders)
        with pytest.raises(GatewayError):
            gateway.create_remote_order(100)
        assert orders.calls == []


class TestFetchRemotePayment:

    def test_found(self, razorpay_gateway):
        gateway = _with_fake_client(razorpay_gateway)
        assert gateway.fetch_remote_payment("pay_B2")["id"] == "pay_B2"

    def test_unknown_id_is_not_found(self, razorpay_gateway):
        gateway = _with_fake_client(
            razorpay_gateway,
            payments=FakePayments(error=BadRequestError("The id provided does not exist")),
        )
        with pytest.raises(NotFoundError):
            gateway.fetch_remote_payment("pay_missing")

    def test_server_failure_is_gateway_error(self, razorpay_gateway):
        gateway = _with_fake_client(razorpay_gateway, payments=FakePayments(error=ServerError("boom")))
        with pytest.raises(GatewayError):
            gateway.fetch_remote_payment("pay_B2")

    def test_mock_payments(self, mock_gateway):
        assert mock_gateway.fetch_remote_payment("pay_mock_1")["status"] == "captured"
        with pytest.raises(NotFoundError):
            mock_gateway.fetch_remote_payment("pay_B2")


class TestGatewayBase:

    def test_base_cannot_be_constructed(self):
        with pytest.raises(TypeError):
            PaymentGateway(KEY_ID, KEY_SECRET)

    def test_incomplete_gateway_fails_at_construction(self):
        class OrdersOnly(PaymentGateway):
            def create_remote_order(self, amount_minor_units, currency="INR", receipt=None, notes=None):
                return None

        with pytest.raises(TypeError):
            OrdersOnly(KEY_ID, KEY_SECRET)


class TestBuildGateway:

    def _settings(self, **overrides):
        values = dict(secret_key="x", RAZORPAY_KEY_ID=KEY_ID, RAZORPAY_KEY_SECRET=KEY_SECRET)
        values.update(overrides)
        return Settings(**values)

    def test_mode_selects_implementation(self):
        assert isinstance(build_payment_gateway(self._settings()), RazorpayGateway)
        assert isinstance(build_payment_gateway(self._settings(PAYMENT_GATEWAY_MODE="mock")), MockGateway)

    def test_mock_mode_refused_in_production(self):
        with pytest.raises(ValueError):
            build_payment_gateway(self._settings(PAYMENT_GATEWAY_MODE="mock", ENV="production"))

    def test_mock_references_never_allowed_in_production(self):
        gateway = build_payment_gateway(self._settings(ENV="production", ALLOW_MOCK_PAYMENTS=True))
        assert not gateway.allow_mock_payments

    def test_describe_masks_key(self, razorpay_gateway):
        info = razorpay_gateway.describe()
        assert info["keyId"] == KEY_ID[:10] + "..."
        assert info["keySecret"] == "SET"
        assert info["razorpayConfigured"] is True
        assert KEY_SECRET not in str(info)
