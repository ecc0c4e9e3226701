import logging
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from typing import Any, Dict, Optional
from uuid import uuid4

import razorpay
import requests
from razorpay.errors import BadRequestError, ServerError, SignatureVerificationError
from razorpay.errors import GatewayError as RazorpayGatewayError

from shopadmin.config import PLACEHOLDER_KEY_ID, PLACEHOLDER_KEY_SECRET, Settings, settings
from shopadmin.exceptions import GatewayError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MOCK_ORDER_PREFIX = "order_mock_"
MOCK_PAYMENT_PREFIX = "pay_mock_"


def is_mock_reference(gateway_order_id: Optional[str]) -> bool:
    return bool(gateway_order_id) and gateway_order_id.startswith(MOCK_ORDER_PREFIX)


def mask_key(key_id: Optional[str]) -> str:
    return key_id[:10] + "..." if key_id else "NOT SET"


@dataclass
class GatewayOrderRef:
    id: str
    amount: int
    currency: str
    receipt: str
    status: str = "created"
    notes: Dict[str, Any] = field(default_factory=dict)
    created_at: int = field(default_factory=lambda: int(time.time()))
    is_mock: bool = False

    @classmethod
    def from_remote(cls, data: Dict[str, Any]) -> "GatewayOrderRef":
        return cls(
            id=data["id"],
            amount=data["amount"],
            currency=data["currency"],
            receipt=data.get("receipt") or "",
            status=data.get("status", "created"),
            notes=data.get("notes") or {},
            created_at=data.get("created_at") or int(time.time()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class VerificationResult:
    success: bool
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    signature: Optional[str] = None
    is_mock: bool = False
    error: Optional[str] = None

    @classmethod
    def mismatch(cls, error: str = "Invalid payment signature") -> "VerificationResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderId": self.order_id,
            "paymentId": self.payment_id,
            "signature": self.signature,
            "isMock": self.is_mock,
        }


def _validate_amount(amount_minor_units) -> None:
    if isinstance(amount_minor_units, bool) or not isinstance(amount_minor_units, int):
        raise ValidationError("Valid amount is required")
    if amount_minor_units <= 0:
        raise ValidationError("Valid amount is required")


class PaymentGateway(ABC):
    """Shared behaviour for the razorpay and mock gateways.

    Signature checks never touch the network: the razorpay utility
    recomputes HMAC-SHA256 over ``order_id|payment_id`` with the key secret
    and compares in constant time.
    """

    mode = ""

    def __init__(self, key_id: str, key_secret: str, timeout: float = 10.0, env: str = "local"):
        self.key_id = key_id
        self.timeout = timeout
        self.env = env
        self._has_secret = bool(key_secret)
        self._placeholder = key_id == PLACEHOLDER_KEY_ID or key_secret == PLACEHOLDER_KEY_SECRET
        self._client = razorpay.Client(auth=(key_id, key_secret))

    @property
    def is_configured(self) -> bool:
        return bool(self.key_id) and self._has_secret and not self._placeholder

    @abstractmethod
    def create_remote_order(
        self,
        amount_minor_units: int,
        currency: str = "INR",
        receipt: Optional[str] = None,
        notes: Optional[Dict[str, Any]] = None,
    ) -> GatewayOrderRef:
        ...

    @abstractmethod
    def fetch_remote_payment(self, payment_id: str) -> Dict[str, Any]:
        ...

    def verify_signature(
        self,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
    ) -> VerificationResult:
        try:
            self._client.utility.verify_payment_signature({
                "razorpay_order_id": gateway_order_id,
                "razorpay_payment_id": gateway_payment_id,
                "razorpay_signature": signature,
            })
        except SignatureVerificationError:
            logger.warning(f"Signature mismatch for gateway order {gateway_order_id}")
            return VerificationResult.mismatch()

        return VerificationResult(
            success=True,
            order_id=gateway_order_id,
            payment_id=gateway_payment_id,
            signature=signature,
        )

    def _mock_verification(self, gateway_order_id, gateway_payment_id, signature) -> VerificationResult:
        now_ms = int(time.time() * 1000)
        logger.info(f"Verifying mock payment for {gateway_order_id}")
        return VerificationResult(
            success=True,
            order_id=gateway_order_id,
            payment_id=gateway_payment_id or f"{MOCK_PAYMENT_PREFIX}{now_ms}",
            signature=signature or f"mock_signature_{now_ms}",
            is_mock=True,
        )

    def describe(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "razorpayConfigured": self.is_configured,
            "keyId": mask_key(self.key_id),
            "keySecret": "SET" if self._has_secret else "NOT SET",
            "environment": self.env,
            "configurationStatus": "Ready" if self.is_configured else "Needs API Keys",
        }


class RazorpayGateway(PaymentGateway):
    mode = "razorpay"

    def __init__(self, *args, allow_mock_payments: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.allow_mock_payments = allow_mock_payments

    def create_remote_order(self, amount_minor_units, currency="INR", receipt=None, notes=None):
        _validate_amount(amount_minor_units)

        if not self.is_configured:
            raise GatewayError(
                "Failed to create payment order",
                error="Razorpay API keys are not configured. Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET.",
            )

        options = {
            "amount": amount_minor_units,
            "currency": currency or "INR",
            "receipt": receipt,
            "notes": notes or {},
        }
        logger.info(
            f"Creating razorpay order amount={amount_minor_units} currency={options['currency']} "
            f"receipt={receipt} key={mask_key(self.key_id)}"
        )

        try:
            order = self._client.order.create(options, timeout=self.timeout)
        except (BadRequestError, ServerError, RazorpayGatewayError) as e:
            logger.error(f"Razorpay order creation failed: {e}")
            raise GatewayError("Failed to create payment order", error=str(e))
        except requests.RequestException as e:
            logger.error(f"Razorpay unreachable while creating order: {e}")
            raise GatewayError("Failed to create payment order", error=str(e))

        logger.info(f"Razorpay order created: {order['id']}")
        return GatewayOrderRef.from_remote(order)

    def verify_signature(self, gateway_order_id, gateway_payment_id, signature):
        if is_mock_reference(gateway_order_id):
            if not self.allow_mock_payments:
                logger.warning(f"Rejected mock payment reference {gateway_order_id}")
                return VerificationResult.mismatch("Mock payment references are not accepted")
            return self._mock_verification(gateway_order_id, gateway_payment_id, signature)

        return super().verify_signature(gateway_order_id, gateway_payment_id, signature)

    def fetch_remote_payment(self, payment_id):
        try:
            return self._client.payment.fetch(payment_id, timeout=self.timeout)
        except BadRequestError as e:
            logger.warning(f"Razorpay payment {payment_id} not found: {e}")
            raise NotFoundError("Payment not found", error=str(e))
        except (ServerError, RazorpayGatewayError, requests.RequestException) as e:
            logger.error(f"Error fetching razorpay payment {payment_id}: {e}")
            raise GatewayError("Server error while fetching payment details", error=str(e))


class MockGateway(PaymentGateway):
    """Issues local ``order_mock_*`` references so checkout can be exercised
    without live gateway credentials. Non-mock references are still checked
    against the configured secret."""

    mode = "mock"

    def create_remote_order(self, amount_minor_units, currency="INR", receipt=None, notes=None):
        _validate_amount(amount_minor_units)

        order = GatewayOrderRef(
            id=f"{MOCK_ORDER_PREFIX}{int(time.time() * 1000)}_{uuid4().hex[:9]}",
            amount=amount_minor_units,
            currency=currency or "INR",
            receipt=receipt or "",
            notes=notes or {},
            is_mock=True,
        )
        logger.info(f"Mock gateway order created: {order.id}")
        return order

    def verify_signature(self, gateway_order_id, gateway_payment_id, signature):
        if is_mock_reference(gateway_order_id):
            return self._mock_verification(gateway_order_id, gateway_payment_id, signature)
        return super().verify_signature(gateway_order_id, gateway_payment_id, signature)

    def fetch_remote_payment(self, payment_id):
        if not payment_id or not payment_id.startswith(MOCK_PAYMENT_PREFIX):
            raise NotFoundError("Payment not found", error=f"Unknown mock payment {payment_id}")

        return {
            "id": payment_id,
            "entity": "payment",
            "status": "captured",
            "method": "mock",
            "captured": True,
            "is_mock": True,
        }


def build_payment_gateway(conf: Settings) -> PaymentGateway:
    kwargs = dict(
        key_id=conf.RAZORPAY_KEY_ID,
        key_secret=conf.RAZORPAY_KEY_SECRET,
        timeout=conf.RAZORPAY_TIMEOUT_SECONDS,
        env=conf.ENV,
    )

    if conf.PAYMENT_GATEWAY_MODE == "mock":
        if conf.is_production:
            raise ValueError("PAYMENT_GATEWAY_MODE=mock is not allowed in production")
        logger.warning("Payment gateway running in MOCK mode")
        return MockGateway(**kwargs)

    if conf.PAYMENT_GATEWAY_MODE != "razorpay":
        raise ValueError(f"Unknown PAYMENT_GATEWAY_MODE: {conf.PAYMENT_GATEWAY_MODE}")

    return RazorpayGateway(
        allow_mock_payments=conf.ALLOW_MOCK_PAYMENTS and not conf.is_production,
        **kwargs,
    )


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    return build_payment_gateway(settings)
