# storefront/services/catalog.py
from typing import List, Tuple

from storefront.data.store import DocumentStore
from storefront.domain.errors import InvalidArgument, NotFound, Unavailable
from storefront.domain.models import Product, Versioned
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductCatalog:
    """
    Read side of the product store plus the availability checks used by carts.

    The checks take a product snapshot; callers inside a transaction pass the
    copy read by the current attempt so a retry always sees fresh stock.
    """

    def __init__(self, store: DocumentStore):
        self.repo = ProductRepo(store)

    def get_by_id(self, product_id: str) -> Versioned[Product]:
        logger.info(f"Getting product data for ID: {product_id}")
        found = self.repo.get(product_id)
        if found is None:
            logger.warning(f"Product not found with ID: {product_id}")
            raise NotFound("Product not found", {"product_id": product_id})
        return found

    @staticmethod
    def check_active(product: Product) -> None:
        if not product.active:
            logger.warning(f"Product is inactive: {product.title}")
            raise Unavailable("This product is currently unavailable", {"product_id": product.id})

    @staticmethod
    def check_stock(product: Product, requested_qty: int) -> None:
        if product.stock <= 0:
            logger.warning(f'Product "{product.title}" is out of stock')
            raise Unavailable("This product is out of stock", {"product_id": product.id})
        if requested_qty > 0 and product.stock < requested_qty:
            logger.warning(
                f'Not enough stock for product "{product.title}". '
                f"Requested: {requested_qty}, Available: {product.stock}"
            )
            raise Unavailable(
                "Not enough stock available",
                {"product_id": product.id, "requested": requested_qty, "available": product.stock},
            )

    def list_active(self, limit: int, offset: int) -> Tuple[List[Product], int]:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise InvalidArgument("limit must be a positive integer")
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise InvalidArgument("offset must be a non-negative integer")
        return self.repo.list_active(limit, offset)
