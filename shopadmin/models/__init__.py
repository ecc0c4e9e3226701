from shopadmin.models.user import User
from shopadmin.models.product import Product
from shopadmin.models.order import Order
from shopadmin.models.order_item import OrderItem
from shopadmin.models.payment_verification import PaymentVerification

# add ALL models here
