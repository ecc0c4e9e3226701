from typing import List, Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings

PLACEHOLDER_KEY_ID = "rzp_test_YOUR_ACTUAL_KEY_ID"
PLACEHOLDER_KEY_SECRET = "YOUR_ACTUAL_KEY_SECRET"


class Settings(BaseSettings):
    ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    # DATABASE_URL wins over the postgres_* parts when set
    DATABASE_URL: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "shop_admin"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    RAZORPAY_KEY_ID: str = PLACEHOLDER_KEY_ID
    RAZORPAY_KEY_SECRET: str = PLACEHOLDER_KEY_SECRET
    RAZORPAY_TIMEOUT_SECONDS: float = 10.0

    # razorpay | mock
    PAYMENT_GATEWAY_MODE: str = "razorpay"
    ALLOW_MOCK_PAYMENTS: bool = False
    ORDER_UPDATE_MAX_ATTEMPTS: int = 3

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    @property
    def database_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"


settings = Settings()
