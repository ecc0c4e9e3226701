from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from shopadmin.models.order import Order
    from shopadmin.models.product import Product


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_item"
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    product_id: int = Field(foreign_key="product.id")

    price: float
    quantity: int

    order: Optional["Order"] = Relationship(back_populates="items")
    product: Optional["Product"] = Relationship()
