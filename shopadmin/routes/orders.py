from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from shopadmin.database import get_session
from shopadmin.dependencies.admin import require_admin
from shopadmin.models.user import User
from shopadmin.schemas.orders_schemas import OrderCreate, OrderStatusUpdate
from shopadmin.services import order_service
from shopadmin.utils.token import get_current_user

router = APIRouter()


def _page_response(data, detailed=False):
    return {
        "success": True,
        "data": [order_service.serialize_order(o, detailed) for o in data["results"]],
        "pagination": data["pagination"],
    }


@router.get("")
def list_orders(
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = Query(None),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    data = order_service.list_orders(session=session, status=status, page=page, limit=limit)
    return _page_response(data)


@router.post("", status_code=201)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = order_service.create_order(
        session=session,
        user=current_user,
        items=payload.items,
        shipping_address=payload.shippingAddress.model_dump() if payload.shippingAddress else None,
        payment_method=payload.paymentMethod,
        notes=payload.notes,
        contact_phone=payload.contactPhone,
    )

    return {
        "success": True,
        "data": order_service.serialize_order(order),
        "message": "Order created successfully",
    }


@router.get("/user/my-orders")
def my_orders(
    page: int = 1,
    limit: int = 10,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    data = order_service.list_orders(
        session=session, user_id=current_user.id, page=page, limit=limit
    )
    return _page_response(data)


@router.get("/{order_id}")
def order_details(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    order = order_service.get_order(session, order_id)
    return {"success": True, "data": order_service.serialize_order(order, detailed=True)}


@router.put("/{order_id}/status")
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    order = order_service.update_order_status(session, order_id, payload.status)
    return {
        "success": True,
        "data": order_service.serialize_order(order),
        "message": "Order status updated successfully",
    }
