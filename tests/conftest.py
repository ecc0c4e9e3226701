"""Shared fixtures: an in-memory SQLite engine, seeded users/products and a
TestClient with the session and payment gateway dependencies overridden."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from shopadmin.database import get_session
from shopadmin.main import app
from shopadmin.models import Product, User
from shopadmin.services.payment_gateway import (
    MockGateway,
    RazorpayGateway,
    get_payment_gateway,
)
from tests.helpers import KEY_ID, KEY_SECRET


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def admin(session):
    user = User(name="Admin", email="admin@example.com", role="admin")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def customer(session):
    user = User(name="Priya", email="priya@example.com")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def products(session):
    items = [
        Product(name="Silk Saree", description="Handwoven", price=500, images=["saree.jpg"]),
        Product(name="Bridal Shoes", description="Gold trim", price=1200, images=[]),
    ]
    for p in items:
        session.add(p)
    session.commit()
    for p in items:
        session.refresh(p)
    return items


@pytest.fixture
def razorpay_gateway():
    return RazorpayGateway(key_id=KEY_ID, key_secret=KEY_SECRET, timeout=5)


@pytest.fixture
def mock_gateway():
    return MockGateway(key_id=KEY_ID, key_secret=KEY_SECRET, timeout=5)


@pytest.fixture
def gateway(razorpay_gateway):
    return razorpay_gateway


@pytest.fixture
def client(engine, gateway):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()
