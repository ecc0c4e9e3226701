from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlmodel import SQLModel, Field


class PaymentVerification(SQLModel, table=True):
    """Append-only record of every successfully verified payment."""

    __tablename__ = "payment_verification"
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)

    gateway_order_id: str = Field(index=True)
    gateway_payment_id: str
    order_id: Optional[int] = Field(default=None, index=True)
    user_id: Optional[int] = None

    is_mock: bool = Field(default=False)
    order_linked: bool = Field(default=False, index=True)
    error: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
