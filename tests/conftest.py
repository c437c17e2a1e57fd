"""
Pytest configuration and fixtures for the storefront tests.
"""
import os

# Set test environment before importing storefront modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CART_TX_BACKOFF_SECONDS"] = "0"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.data.database import init_db
from storefront.data.memory_store import InMemoryDocumentStore
from storefront.data.sql_store import SqlDocumentStore
from storefront.services.cart_service import CartService
from storefront.services.product_service import ProductService
from storefront.services.transaction_runner import TransactionRunner
from storefront.services.user_service import UserService

SELLER = "seller-1"


class RecordingNotifier:
    """Stands in for the Celery-backed NotificationService."""

    def __init__(self):
        self.sent = []

    def send_checkout_notification(self, cart):
        self.sent.append(cart)


def product_fields(**overrides):
    fields = {
        "title": "Brake pads",
        "description": "Front brake pads",
        "price": Decimal("10"),
        "stock": 5,
        "active": True,
        "brand": "Honda",
        "tags": ["brakes", "front"],
        "image_url": "images/brake-pads.png",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def sql_store():
    """SqlDocumentStore on a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield SqlDocumentStore(sessionmaker(bind=engine, autoflush=False, expire_on_commit=False))
    engine.dispose()


@pytest.fixture
def runner():
    return TransactionRunner(max_attempts=5, backoff=0)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def cart_service(store, runner, notifier):
    return CartService(store, runner=runner, notifier=notifier)


@pytest.fixture
def product_service(store, runner):
    return ProductService(store, runner=runner)


@pytest.fixture
def user_service(store, runner):
    return UserService(store, runner=runner)


@pytest.fixture
def make_product(product_service):
    """Factory creating a listing owned by SELLER unless told otherwise."""

    def _make(owner=SELLER, **overrides):
        return product_service.create_product(owner, **product_fields(**overrides)).unwrap()

    return _make


@pytest.fixture
def test_client(store, runner, notifier):
    """
    TestClient with the in-memory store, a non-sleeping runner and the
    recording notifier swapped in through dependency overrides.
    """
    from storefront.api.deps import get_notifier, get_runner, get_store
    from storefront.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_runner] = lambda: runner
    app.dependency_overrides[get_notifier] = lambda: notifier

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
