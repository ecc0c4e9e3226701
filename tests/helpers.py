import hashlib
import hmac

from shopadmin.models import User
from shopadmin.utils.token import create_access_token

KEY_ID = "rzp_test_Abc123XyZ789"
KEY_SECRET = "test_gateway_secret"


def sign(gateway_order_id: str, gateway_payment_id: str, secret: str = KEY_SECRET) -> str:
    return hmac.new(
        secret.encode(),
        f"{gateway_order_id}|{gateway_payment_id}".encode(),
        hashlib.sha256,
    ).hexdigest()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'id': user.id})}"}


SHIPPING = {
    "street": "12 MG Road",
    "city": "Hyderabad",
    "state": "Telangana",
    "zipCode": "500001",
    "country": "India",
}
