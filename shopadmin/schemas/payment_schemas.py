from pydantic import AliasChoices, BaseModel, Field
from typing import Any, Dict, Optional


class CreatePaymentOrder(BaseModel):
    amount: Optional[float] = None
    currency: Optional[str] = None
    receipt: Optional[str] = None
    notes: Optional[Dict[str, Any]] = None


class PaymentVerifySchema(BaseModel):
    gateway_order_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gateway_order_id", "razorpay_order_id"),
    )
    gateway_payment_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gateway_payment_id", "razorpay_payment_id"),
    )
    gateway_signature: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gateway_signature", "razorpay_signature"),
    )
    order_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("orderId", "order_id"),
    )
