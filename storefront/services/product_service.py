# storefront/services/product_service.py
from typing import Any, Dict, List, Optional, Tuple

from storefront.data.store import DocumentStore
from storefront.domain.errors import InvalidArgument, PermissionDenied
from storefront.domain.models import Product, Versioned, is_blank
from storefront.domain.result import returns_result
from storefront.repos.product_repo import ProductRepo
from storefront.services.catalog import ProductCatalog
from storefront.services.transaction_runner import TransactionRunner
from storefront.utils.settings import PRODUCTS_PAGE_LIMIT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """Listings managed by their owners. Updates and removals are version guarded."""

    def __init__(self, store: DocumentStore, runner: Optional[TransactionRunner] = None):
        self.repo = ProductRepo(store)
        self.catalog = ProductCatalog(store)
        self.runner = runner or TransactionRunner()

    @returns_result
    def create_product(self, owner: str, **fields: Any) -> Product:
        product = Product.create(owner, **fields)
        created = self.repo.insert(product).entity
        logger.info(f"Product created successfully with ID: {created.id}")
        return created

    @returns_result
    def get_product(self, principal: str, product_id: str) -> Product:
        product = self._get(product_id).entity
        # owners see their inactive listings, everyone else does not
        if not product.is_owned_by(principal):
            self.catalog.check_active(product)
        return product

    @returns_result
    def list_products(self, limit: int = PRODUCTS_PAGE_LIMIT, offset: int = 0) -> Tuple[List[Product], int]:
        products, total = self.catalog.list_active(limit, offset)
        logger.info(f"Retrieved {len(products)} of {total} active products")
        return products, total

    @returns_result
    def update_product(self, principal: str, product_id: str, changes: Dict[str, Any]) -> Product:
        logger.info(f"Updating product {product_id} for user {principal}")

        def mutate(current: Versioned[Product]) -> Product:
            self._ensure_owner(current.entity, principal)
            return current.entity.apply_changes(changes)

        def write(current: Versioned[Product], product: Product) -> Product:
            return self.repo.save(product, current.version).entity

        product = self.runner.run(lambda: self._get(product_id), mutate, write)
        logger.info(f"Product {product_id} updated successfully")
        return product

    @returns_result
    def remove_product(self, principal: str, product_id: str) -> str:
        logger.info(f"Removing product {product_id} for user {principal}")

        def mutate(current: Versioned[Product]) -> None:
            self._ensure_owner(current.entity, principal)

        def write(current: Versioned[Product], _) -> str:
            self.repo.delete(product_id, current.version)
            return product_id

        removed = self.runner.run(lambda: self._get(product_id), mutate, write)
        logger.info(f"Product {product_id} removed successfully")
        return removed

    def _get(self, product_id: str) -> Versioned[Product]:
        if is_blank(product_id):
            raise InvalidArgument("Product ID must be a non-empty string")
        return self.catalog.get_by_id(product_id)

    @staticmethod
    def _ensure_owner(product: Product, principal: str) -> None:
        if not product.is_owned_by(principal):
            logger.warning(f"User {principal} is not the owner of product {product.id}")
            raise PermissionDenied("You are not the owner of this product")
