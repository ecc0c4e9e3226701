from fastapi import APIRouter, Depends
from sqlmodel import Session

from shopadmin.database import get_session
from shopadmin.dependencies.admin import require_admin
from shopadmin.models.user import User
from shopadmin.schemas.payment_schemas import CreatePaymentOrder, PaymentVerifySchema
from shopadmin.services import payment_service
from shopadmin.services.payment_gateway import PaymentGateway, get_payment_gateway
from shopadmin.utils.token import get_current_user

router = APIRouter()


@router.get("/config")
def payment_config(gateway: PaymentGateway = Depends(get_payment_gateway)):
    # public key id only, never the secret
    return {"success": True, "data": {"keyId": gateway.key_id or None}}


@router.get("/test")
def payment_test(
    gateway: PaymentGateway = Depends(get_payment_gateway),
    _: User = Depends(get_current_user),
):
    return {
        "success": True,
        "message": "Payment service is working",
        "data": gateway.describe(),
    }


@router.post("/create-order")
def create_payment_order(
    payload: CreatePaymentOrder,
    gateway: PaymentGateway = Depends(get_payment_gateway),
    _: User = Depends(get_current_user),
):
    order = payment_service.create_gateway_order(
        gateway=gateway,
        amount=payload.amount,
        currency=payload.currency,
        receipt=payload.receipt,
        notes=payload.notes,
    )
    return {
        "success": True,
        "data": order.to_dict(),
        "message": "Payment order created successfully",
    }


@router.post("/verify")
def verify_payment(
    payload: PaymentVerifySchema,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    current_user: User = Depends(get_current_user),
):
    result = payment_service.verify_payment(
        session=session,
        gateway=gateway,
        gateway_order_id=payload.gateway_order_id,
        gateway_payment_id=payload.gateway_payment_id,
        gateway_signature=payload.gateway_signature,
        order_id=payload.order_id,
        user=current_user,
    )
    return {
        "success": True,
        "data": result.to_dict(),
        "message": "Payment verified successfully",
    }


@router.get("/verifications")
def list_verifications(
    orphaned: bool = False,
    page: int = 1,
    limit: int = 10,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    data = payment_service.list_verifications(
        session=session, orphaned=orphaned, page=page, limit=limit
    )
    return {
        "success": True,
        "data": [v.model_dump() for v in data["results"]],
        "pagination": data["pagination"],
    }


@router.get("/{payment_id}")
def payment_details(
    payment_id: str,
    gateway: PaymentGateway = Depends(get_payment_gateway),
    _: User = Depends(get_current_user),
):
    payment = gateway.fetch_remote_payment(payment_id)
    return {
        "success": True,
        "data": payment,
        "message": "Payment details retrieved successfully",
    }
