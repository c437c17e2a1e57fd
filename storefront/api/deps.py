# storefront/api/deps.py
from functools import lru_cache
from typing import Optional, TypeVar

from fastapi import Depends, Header

from storefront.data.database import SessionLocal
from storefront.data.sql_store import SqlDocumentStore
from storefront.data.store import DocumentStore
from storefront.domain.errors import Unauthenticated
from storefront.domain.result import Result
from storefront.services.cart_service import CartService
from storefront.services.notification_service import NotificationService
from storefront.services.product_service import ProductService
from storefront.services.transaction_runner import TransactionRunner
from storefront.services.user_service import UserService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@lru_cache
def get_store() -> DocumentStore:
    return SqlDocumentStore(SessionLocal)


def get_runner() -> TransactionRunner:
    return TransactionRunner()


def get_notifier() -> NotificationService:
    return NotificationService()


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    The gateway verifies the caller's token and forwards the uid in X-User-Id;
    the header is trusted as-is.
    """
    if not x_user_id or not x_user_id.strip():
        logger.warning("User not authenticated")
        raise Unauthenticated("User must be authenticated")
    return x_user_id.strip()


def get_cart_service(
    store: DocumentStore = Depends(get_store),
    runner: TransactionRunner = Depends(get_runner),
    notifier: NotificationService = Depends(get_notifier),
) -> CartService:
    return CartService(store=store, runner=runner, notifier=notifier)


def get_product_service(
    store: DocumentStore = Depends(get_store),
    runner: TransactionRunner = Depends(get_runner),
) -> ProductService:
    return ProductService(store=store, runner=runner)


def get_user_service(
    store: DocumentStore = Depends(get_store),
    runner: TransactionRunner = Depends(get_runner),
) -> UserService:
    return UserService(store=store, runner=runner)


def unwrap(result: Result[T]) -> T:
    # failures are rendered by the StorefrontError handler in storefront.api.errors
    return result.unwrap()
