import logging
import math
import time
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from shopadmin.config import settings
from shopadmin.exceptions import (
    NotFoundError,
    SignatureMismatch,
    StorageError,
    ValidationError,
)
from shopadmin.models.payment_verification import PaymentVerification
from shopadmin.models.user import User
from shopadmin.services import order_service
from shopadmin.services.payment_gateway import (
    GatewayOrderRef,
    PaymentGateway,
    VerificationResult,
)
from shopadmin.utils.pagination import paginate

logger = logging.getLogger(__name__)

RETRY_BACKOFF_SECONDS = 0.2


def create_gateway_order(
    *,
    gateway: PaymentGateway,
    amount: Optional[float],
    currency: Optional[str] = None,
    receipt: Optional[str] = None,
    notes: Optional[Dict[str, Any]] = None,
) -> GatewayOrderRef:
    """Create a remote order for ``amount`` given in major currency units."""
    if amount is None or amount <= 0 or not math.isfinite(amount * 100):
        raise ValidationError("Valid amount is required")

    return gateway.create_remote_order(
        int(round(amount * 100)),
        currency=currency or "INR",
        receipt=receipt or f"receipt_{int(time.time() * 1000)}",
        notes=notes or {},
    )


def _link_order(
    *,
    session: Session,
    order_id: int,
    result: VerificationResult,
    payment_gateway: str,
    max_attempts: int,
):
    """
    Apply a verified payment to its order.

    Storage failures are retried a bounded number of times; a missing or
    already-linked order is not. Returns ``(linked, error)`` and never raises.
    """
    last_error = None

    for attempt in range(1, max_attempts + 1):
        try:
            order_service.record_payment(
                session=session,
                order_id=order_id,
                gateway_order_id=result.order_id,
                gateway_payment_id=result.payment_id,
                gateway_signature=result.signature,
                payment_gateway=payment_gateway,
            )
            return True, None

        except NotFoundError:
            logger.warning(f"Order not found for ID: {order_id}")
            return False, "Order not found"

        except ValidationError as e:
            logger.warning(e.message)
            return False, e.message

        except StorageError as e:
            last_error = e.error or e.message

        except SQLAlchemyError as e:
            session.rollback()
            last_error = str(e)

        logger.warning(f"Order {order_id} update attempt {attempt} failed: {last_error}")
        if attempt < max_attempts:
            time.sleep(RETRY_BACKOFF_SECONDS * attempt)

    logger.error(
        f"Payment {result.payment_id} verified but order {order_id} was not updated: {last_error}"
    )
    return False, last_error


def _record_verification(
    session: Session,
    result: VerificationResult,
    order_id: Optional[int],
    user: Optional[User],
    linked: bool,
    error: Optional[str],
):
    entry = PaymentVerification(
        gateway_order_id=result.order_id,
        gateway_payment_id=result.payment_id,
        order_id=order_id,
        user_id=user.id if user else None,
        is_mock=result.is_mock,
        order_linked=linked,
        error=error,
    )
    session.add(entry)

    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(
            f"Could not record verification of {result.order_id}/{result.payment_id}: {e}"
        )


def verify_payment(
    *,
    session: Session,
    gateway: PaymentGateway,
    gateway_order_id: Optional[str],
    gateway_payment_id: Optional[str],
    gateway_signature: Optional[str],
    order_id: Optional[int] = None,
    user: Optional[User] = None,
    max_attempts: Optional[int] = None,
) -> VerificationResult:
    """
    Verify a client-submitted payment proof and, when ``order_id`` is given,
    mark that order paid.

    Once the signature checks out the payment is reported as verified even if
    the order update fails; that failure is only logged and left in the
    verification ledger with ``order_linked=False``.
    """
    if not gateway_order_id or not gateway_payment_id or not gateway_signature:
        raise ValidationError("Payment verification data is required")

    result = gateway.verify_signature(gateway_order_id, gateway_payment_id, gateway_signature)

    if not result.success:
        raise SignatureMismatch("Payment verification failed", error=result.error)

    logger.info(
        f"Payment verified gateway_order={result.order_id} payment={result.payment_id} "
        f"mock={result.is_mock}"
    )

    linked, error = False, None
    if order_id is not None:
        linked, error = _link_order(
            session=session,
            order_id=order_id,
            result=result,
            payment_gateway="mock" if result.is_mock else gateway.mode,
            max_attempts=max_attempts or settings.ORDER_UPDATE_MAX_ATTEMPTS,
        )

    _record_verification(session, result, order_id, user, linked, error)
    return result


def list_verifications(
    *,
    session: Session,
    orphaned: bool = False,
    page: int = 1,
    limit: int = 10,
):
    query = select(PaymentVerification)

    if orphaned:
        # verified against an order that was never updated
        query = query.where(
            PaymentVerification.order_id.is_not(None),
            PaymentVerification.order_linked == False,  # noqa: E712
        )

    query = query.order_by(PaymentVerification.created_at.desc())

    try:
        return paginate(session=session, query=query, page=page, limit=limit)
    except SQLAlchemyError as e:
        logger.error(f"Storage failure while fetching verifications: {e}")
        raise StorageError("Server error while fetching verifications", error=str(e))
