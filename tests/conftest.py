"""Pytest configuration and fixtures"""
import os
import tempfile
from decimal import Decimal

import pytest

# Set test environment variables before the app module is imported
_db_dir = tempfile.mkdtemp(prefix="azu-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_db_dir, 'test.db')}")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test")
os.environ.setdefault("DOMAIN", "https://shop.example")
os.environ.setdefault("FLASK_SECRET_KEY", "test-secret")

from cart import Cart, LineItem


@pytest.fixture
def storage():
    """Stand-in for the browser-scoped storage slot"""
    return {}


@pytest.fixture
def cart(storage):
    return Cart(storage)


@pytest.fixture
def gin_set():
    return LineItem(
        id="A",
        name="Gin Set",
        price=Decimal("52.00"),
        image="/images/a.jpg",
        price_ref="price_A",
    )


@pytest.fixture
def client():
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
