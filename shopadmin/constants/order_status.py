from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"
    refunded = "refunded"


class PaymentMethod(str, Enum):
    credit_card = "credit_card"
    debit_card = "debit_card"
    paypal = "paypal"
    cash_on_delivery = "cash_on_delivery"
    razorpay = "razorpay"


# Any status may move to any other status; only membership is checked.
VALID_ORDER_STATUSES = [s.value for s in OrderStatus]

STATUS_FILTER_ALL = "all"
