import os
import tempfile

# Configure the app before anything imports grocery_service.config.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="grocery-uploads-")
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin123"
for name in ("STEADFAST_API_KEY", "STEADFAST_SECRET_KEY", "FRAUD_CHECK_API_KEY", "WHATSAPP_API_KEY"):
    os.environ.pop(name, None)

from unittest import mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from grocery_service import entitlements
from grocery_service.database import Base, get_db
from grocery_service.main import app
from grocery_service.models import Order, OrderItem, Settings

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def enable_module(db):
    """Purchase and enable a module directly through the entitlement layer."""

    def _enable(module_id):
        entitlements.purchase(db, module_id)
        return entitlements.enable(db, module_id)

    return _enable


@pytest.fixture
def credentials(db):
    """Settings row carrying credentials for every integration."""
    settings = Settings(
        singleton=True,
        steadfast_api_key="sf-key",
        steadfast_secret_key="sf-secret",
        fraud_check_api_key="fc-key",
        whatsapp_api_key="wa-key",
        whatsapp_phone_number_id="12345",
    )
    db.add(settings)
    db.commit()
    return settings


@pytest.fixture
def make_order(db):
    def _make(order_id="ORD-1", total=110.0, status="pending", order_date=None, items=None, **fields):
        order = Order(
            order_id=order_id,
            customer_name=fields.pop("customer_name", "Rahim"),
            phone=fields.pop("phone", "01700000000"),
            address=fields.pop("address", "Dhaka"),
            subtotal=fields.pop("subtotal", 100.0),
            tax=fields.pop("tax", 5.0),
            shipping=fields.pop("shipping", 5.0),
            total=total,
            status=status,
            items=[
                OrderItem(product_id=pid, quantity=qty, name=name, price=price, image="")
                for pid, qty, name, price in (items or [("1", 2, "Rice", 50.0)])
            ],
            **fields,
        )
        if order_date is not None:
            order.order_date = order_date
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make


@pytest.fixture
def fake_response():
    """Build a stand-in for a ``requests.Response``."""

    def _make(payload, status_code=200):
        response = mock.Mock()
        response.status_code = status_code
        response.ok = status_code < 400
        response.json.return_value = payload
        return response

    return _make
