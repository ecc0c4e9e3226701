from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import Any, Dict, List, Optional
from datetime import datetime

from shopadmin.models.order_item import OrderItem
from shopadmin.models.user import User


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    total_amount: float

    status: str = Field(default="pending", index=True)
    payment_method: str
    payment_status: str = Field(default="pending")
    # gateway_order_id, gateway_payment_id, gateway_signature,
    # transaction_id, payment_gateway
    payment_details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    shipping_address: Dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
    contact_phone: str = Field(default="")
    notes: Optional[str] = Field(default=None, max_length=500)

    delivery_date: Optional[datetime] = None
    delivery_time: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    user: Optional["User"] = Relationship()
    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderItem.id"},
    )
