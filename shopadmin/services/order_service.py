import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from shopadmin.constants.order_status import (
    STATUS_FILTER_ALL,
    VALID_ORDER_STATUSES,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from shopadmin.exceptions import NotFoundError, StorageError, ValidationError
from shopadmin.models.order import Order
from shopadmin.models.order_item import OrderItem
from shopadmin.models.product import Product
from shopadmin.models.user import User
from shopadmin.utils.pagination import paginate

logger = logging.getLogger(__name__)


def _commit(session: Session, action: str):
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Storage failure while {action}: {e}")
        raise StorageError(f"Server error while {action}", error=str(e))


def _refresh(session: Session, obj, action: str):
    try:
        session.refresh(obj)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Storage failure while {action}: {e}")
        raise StorageError(f"Server error while {action}", error=str(e))


def _field(item, name):
    return item.get(name) if isinstance(item, dict) else getattr(item, name)


def create_order(
    *,
    session: Session,
    user: User,
    items: Optional[List[Any]],
    shipping_address: Optional[Dict[str, Any]],
    payment_method: Optional[str],
    notes: Optional[str] = None,
    contact_phone: Optional[str] = None,
) -> Order:
    """
    Persist a new pending order.

    The total is summed from the prices the caller sent; the catalog is only
    consulted to confirm the referenced products exist.
    """
    if not items:
        raise ValidationError("Order items are required")

    if not shipping_address:
        raise ValidationError("Shipping address is required")

    if not payment_method:
        raise ValidationError("Payment method is required")

    if payment_method not in [m.value for m in PaymentMethod]:
        raise ValidationError(
            "Invalid payment method. Must be one of: "
            + ", ".join(m.value for m in PaymentMethod)
        )

    if notes and len(notes) > 500:
        raise ValidationError("Notes cannot exceed 500 characters")

    total_amount = 0
    order_items = []

    for item in items:
        product_id = _field(item, "product")
        quantity = _field(item, "quantity")
        price = _field(item, "price")

        if quantity is None or quantity < 1:
            raise ValidationError("Item quantity must be at least 1")
        if price is None or price < 0:
            raise ValidationError("Item price cannot be negative")
        if not session.get(Product, product_id):
            raise ValidationError(f"Product {product_id} not found")

        total_amount += price * quantity
        order_items.append(OrderItem(product_id=product_id, quantity=quantity, price=price))

    order = Order(
        user_id=user.id,
        total_amount=total_amount,
        status=OrderStatus.pending.value,
        payment_status=PaymentStatus.pending.value,
        payment_method=payment_method,
        shipping_address=dict(shipping_address),
        contact_phone=contact_phone or "",
        notes=notes,
        items=order_items,
    )

    session.add(order)
    _commit(session, "creating order")
    _refresh(session, order, "creating order")

    logger.info(f"Order {order.id} created by user {user.id} total={total_amount}")
    return order


def get_order(session: Session, order_id: int) -> Order:
    try:
        order = session.get(Order, order_id)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Storage failure while fetching order {order_id}: {e}")
        raise StorageError("Server error while fetching order", error=str(e))

    if not order:
        raise NotFoundError("Order not found")
    return order


def update_order_status(session: Session, order_id: int, status: Optional[str]) -> Order:
    # No adjacency rules: any valid status may follow any other.
    if not status:
        raise ValidationError("Status is required")

    if status not in VALID_ORDER_STATUSES:
        raise ValidationError(
            "Invalid status. Must be one of: " + ", ".join(VALID_ORDER_STATUSES)
        )

    order = get_order(session, order_id)

    now = datetime.utcnow()
    order.status = status
    order.updated_at = now

    if status == OrderStatus.delivered.value:
        order.delivery_date = now
        order.delivery_time = now.strftime("%I:%M %p")

    session.add(order)
    _commit(session, "updating order status")
    _refresh(session, order, "updating order status")

    logger.info(f"Order {order.id} status -> {status}")
    return order


def list_orders(
    *,
    session: Session,
    status: Optional[str] = None,
    user_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
):
    query = select(Order)

    if status and status != STATUS_FILTER_ALL:
        query = query.where(Order.status == status)

    if user_id is not None:
        query = query.where(Order.user_id == user_id)

    query = query.order_by(Order.created_at.desc(), Order.id.desc())

    try:
        return paginate(session=session, query=query, page=page, limit=limit)
    except SQLAlchemyError as e:
        logger.error(f"Storage failure while fetching orders: {e}")
        raise StorageError("Server error while fetching orders", error=str(e))


def record_payment(
    *,
    session: Session,
    order_id: int,
    gateway_order_id: str,
    gateway_payment_id: str,
    gateway_signature: str,
    payment_gateway: str = "razorpay",
) -> Order:
    """
    Mark an order paid after its gateway signature checked out.

    Re-verifying against the same gateway order overwrites the details with
    the latest values. An order already tied to a different gateway order
    keeps its original link.
    """
    order = get_order(session, order_id)

    linked_to = (order.payment_details or {}).get("transaction_id")
    if linked_to and linked_to != gateway_order_id:
        raise ValidationError(
            f"Order {order_id} is already linked to gateway order {linked_to}"
        )

    order.payment_status = PaymentStatus.paid.value
    order.status = OrderStatus.processing.value
    order.payment_details = {
        "gateway_order_id": gateway_order_id,
        "gateway_payment_id": gateway_payment_id,
        "gateway_signature": gateway_signature,
        "transaction_id": gateway_order_id,
        "payment_gateway": payment_gateway,
    }
    order.updated_at = datetime.utcnow()

    session.add(order)
    _commit(session, "updating order payment")
    _refresh(session, order, "updating order payment")

    logger.info(f"Order {order.id} marked paid via {gateway_order_id}")
    return order


def serialize_order(order: Order, detailed: bool = False) -> Dict[str, Any]:
    user = order.user

    def product_view(product: Optional[Product]):
        if product is None:
            return None
        data = {
            "id": product.id,
            "name": product.name,
            "price": product.price,
            "images": product.images or [],
        }
        if detailed:
            data["description"] = product.description
        return data

    return {
        "id": order.id,
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
        } if user else None,
        "items": [
            {
                "product": product_view(i.product),
                "quantity": i.quantity,
                "price": i.price,
            }
            for i in order.items
        ],
        "totalAmount": order.total_amount,
        "status": order.status,
        "paymentMethod": order.payment_method,
        "paymentStatus": order.payment_status,
        "paymentDetails": order.payment_details,
        "shippingAddress": order.shipping_address,
        "contactPhone": order.contact_phone,
        "notes": order.notes,
        "deliveryDate": order.delivery_date,
        "deliveryTime": order.delivery_time,
        "createdAt": order.created_at,
        "updatedAt": order.updated_at,
    }
