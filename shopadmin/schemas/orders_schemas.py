from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ShippingAddress(BaseModel):
    street: str
    city: str
    state: str
    zipCode: str
    country: str


class OrderItemIn(BaseModel):
    product: int
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)


class OrderCreate(BaseModel):
    # presence of these three is checked by the order service so the
    # client gets the same messages whichever one is missing
    items: Optional[List[OrderItemIn]] = None
    shippingAddress: Optional[ShippingAddress] = None
    paymentMethod: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=500)
    contactPhone: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: Optional[str] = None
