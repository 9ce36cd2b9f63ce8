import os
import tempfile

# Settings are read at import time, configure before importing storefront
_DB_DIR = tempfile.mkdtemp(prefix="digistore-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient

import storefront.models  # noqa: F401
from storefront.core.database import Base, get_engine, get_session_local
from storefront.core.security import get_password_hash
from storefront.models.order import Order, OrderStatus
from storefront.models.product import Product
from storefront.models.user import Profile, UserRole
from storefront.schemas.settings import StoreSettings
from storefront.services.settings_service import SettingsService

PASSWORD = "rahasia123"
_PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture(autouse=True)
def tables():
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = get_session_local()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from storefront.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_profile(db):
    def _make(email, affiliate_code=None, referred_by=None, balance=0, role=UserRole.USER, **fields):
        profile = Profile(
            email=email,
            password=_PASSWORD_HASH,
            full_name=fields.pop("full_name", email.split("@")[0].title()),
            role=role,
            affiliate_code=affiliate_code,
            referred_by=referred_by,
            balance=balance,
            **fields
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make


@pytest.fixture
def make_product(db):
    def _make(name="Template CV", price=100000, cost_price=40000, discount_price=None, is_active=True, category="Template"):
        product = Product(
            name=name,
            price=price,
            cost_price=cost_price,
            discount_price=discount_price,
            is_active=is_active,
            category=category,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make


@pytest.fixture
def make_order(db):
    def _make(buyer=None, items=None, discount_amount=0, status=OrderStatus.COMPLETED):
        items = items or []
        subtotal = sum(item["price"] * item["quantity"] for item in items)
        order = Order(
            order_code=f"INV-T{db.query(Order).count() + 1:07d}",
            user_id=buyer.id if buyer else None,
            guest_info=None if buyer else {"name": "Tamu", "phone": "08123456789"},
            items=items,
            subtotal=subtotal,
            discount_amount=discount_amount,
            total_amount=max(0, subtotal - discount_amount),
            status=status,
            commission_paid=False,
            payment_method="TRANSFER",
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order
    return _make


@pytest.fixture
def commission_rate(db):
    def _set(rate, **fields):
        SettingsService.save_store_settings(db, StoreSettings(affiliate_commission_rate=rate, **fields))
    return _set


def item(product, quantity=1, price=None, cost_price=None):
    """Order item snapshot for a product"""
    return {
        "product_id": product.id,
        "product_name": product.name,
        "quantity": quantity,
        "price": product.effective_price if price is None else price,
        "cost_price": product.cost_price if cost_price is None else cost_price,
    }


def auth_headers(client, email, password=PASSWORD, full_name=None, referral_code=None):
    """Register (or log in when already registered) and return bearer headers"""
    payload = {"email": email, "password": password, "full_name": full_name or email.split("@")[0]}
    if referral_code:
        payload["referral_code"] = referral_code
    response = client.post("/api/v1/auth/register", json=payload)
    if response.status_code == 400:
        response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    tokens = response.json()["data"]["tokens"]
    return {"Authorization": f"Bearer {tokens['access_token']}"}
