# storefront/services/cart_service.py
from dataclasses import dataclass
from typing import Optional

from storefront.data.store import DocumentStore
from storefront.domain.errors import InvalidArgument, NotFound, PermissionDenied
from storefront.domain.models import Cart, Product, Versioned, is_blank, is_positive_int
from storefront.domain.result import returns_result
from storefront.repos.cart_repo import CartRepo
from storefront.services.catalog import ProductCatalog
from storefront.services.notification_service import NotificationService
from storefront.services.transaction_runner import TransactionRunner
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    """What one transaction attempt read: the pending cart and, if needed, the product."""

    cart: Optional[Versioned[Cart]]
    product: Optional[Product] = None


def _require_quantity(quantity) -> None:
    if not is_positive_int(quantity):
        logger.warning(f"Invalid argument: quantity {quantity!r} must be a positive integer")
        raise InvalidArgument("Quantity must be a positive integer")


def _require_product_id(product_id) -> None:
    if is_blank(product_id):
        logger.warning("Invalid argument: product ID must be a non-empty string")
        raise InvalidArgument("Product ID must be a non-empty string")


class CartService:
    """
    Cart use cases for the caller's single pending cart.

    Every mutation is one TransactionRunner unit over one cart record:
    the pending cart (and product, where stock matters) is re-read on each
    attempt, the change is computed on that snapshot, and the write is
    guarded by the cart version that was read.
    Operations return Result; domain failures never escape as exceptions.
    """

    def __init__(
        self,
        store: DocumentStore,
        runner: Optional[TransactionRunner] = None,
        notifier: Optional[NotificationService] = None,
    ):
        self.carts = CartRepo(store)
        self.catalog = ProductCatalog(store)
        self.runner = runner or TransactionRunner()
        self.notifier = notifier or NotificationService()

    # query
    @returns_result
    def get_cart(self, owner: str) -> Cart:
        logger.info(f"Getting pending cart for user: {owner}")
        return self._require_pending(owner).entity

    @returns_result
    def get_cart_by_id(self, owner: str, cart_id: str) -> Cart:
        found = self.carts.get(cart_id)
        if found is None:
            raise NotFound("Cart not found", {"cart_id": cart_id})
        if found.entity.owner != owner:
            logger.warning(f"User {owner} is not the owner of cart {cart_id}")
            raise PermissionDenied("You are not the owner of this cart")
        return found.entity

    # commands
    @returns_result
    def add_line(self, owner: str, product_id: str, quantity: int) -> Cart:
        _require_product_id(product_id)
        _require_quantity(quantity)
        logger.info(f"Adding product {product_id} with quantity {quantity} to cart for user {owner}")

        def read() -> _Snapshot:
            return _Snapshot(
                cart=self.carts.find_pending(owner),
                product=self.catalog.get_by_id(product_id).entity,
            )

        def mutate(snapshot: _Snapshot) -> Cart:
            product = snapshot.product
            self.catalog.check_active(product)
            self.catalog.check_stock(product, quantity)
            if snapshot.cart is None:
                # first add for this owner creates the cart
                return Cart(owner=owner).add_line(product_id, product.price, quantity)
            cart = snapshot.cart.entity
            self._ensure_mutable(cart, owner)
            return cart.add_line(product_id, product.price, quantity)

        cart = self.runner.run(read, mutate, self._write)
        logger.info(
            f'Product "{product_id}" in cart {cart.id} now has quantity '
            f"{cart.lines[product_id].quantity}"
        )
        return cart

    @returns_result
    def update_line_quantity(self, owner: str, product_id: str, quantity: int) -> Cart:
        _require_product_id(product_id)
        _require_quantity(quantity)
        logger.info(f"Updating product {product_id} quantity to {quantity} for user {owner}")

        def read() -> _Snapshot:
            pending = self._require_pending(owner)
            pending.entity.line(product_id)
            return _Snapshot(cart=pending, product=self.catalog.get_by_id(product_id).entity)

        def mutate(snapshot: _Snapshot) -> Cart:
            # stock is checked against the new absolute quantity, not the delta
            self.catalog.check_active(snapshot.product)
            self.catalog.check_stock(snapshot.product, quantity)
            cart = snapshot.cart.entity
            self._ensure_mutable(cart, owner)
            return cart.set_quantity(product_id, quantity)

        cart = self.runner.run(read, mutate, self._write)
        logger.info(f"Product {product_id} quantity updated to {quantity} in cart {cart.id}")
        return cart

    @returns_result
    def remove_line(self, owner: str, product_id: str) -> Cart:
        _require_product_id(product_id)
        logger.info(f"Removing product {product_id} from cart for user {owner}")

        def mutate(snapshot: _Snapshot) -> Cart:
            cart = snapshot.cart.entity
            self._ensure_mutable(cart, owner)
            return cart.remove_line(product_id)

        cart = self.runner.run(self._pending_snapshot(owner), mutate, self._write)
        logger.info(f"Product {product_id} removed from cart {cart.id}")
        return cart

    @returns_result
    def clear_cart(self, owner: str) -> Cart:
        logger.info(f"Clearing cart for user {owner}")

        def mutate(snapshot: _Snapshot) -> Cart:
            cart = snapshot.cart.entity
            self._ensure_mutable(cart, owner)
            return cart.clear()

        cart = self.runner.run(self._pending_snapshot(owner), mutate, self._write)
        logger.info(f"Cart {cart.id} cleared for user {owner}")
        return cart

    @returns_result
    def checkout(self, owner: str) -> Cart:
        """
        Moves the pending cart to completed. No payment and no stock change
        happen here; a second call finds no pending cart and gets NotFound.
        """
        logger.info(f"Checking out cart for user {owner}")

        def mutate(snapshot: _Snapshot) -> Cart:
            cart = snapshot.cart.entity
            self._ensure_mutable(cart, owner)
            return cart.complete()

        cart = self.runner.run(self._pending_snapshot(owner), mutate, self._write)
        logger.info(f"Checkout completed for user {owner}, cart {cart.id}, total {cart.total}")
        self.notifier.send_checkout_notification(cart)
        return cart

    # helpers
    def _require_pending(self, owner: str) -> Versioned[Cart]:
        pending = self.carts.find_pending(owner)
        if pending is None:
            logger.warning(f"No pending cart found for user: {owner}")
            raise NotFound("No pending cart found for this user", {"owner": owner})
        return pending

    def _pending_snapshot(self, owner: str):
        return lambda: _Snapshot(cart=self._require_pending(owner))

    @staticmethod
    def _ensure_mutable(cart: Cart, owner: str) -> None:
        if cart.owner != owner:
            raise PermissionDenied("You are not the owner of this cart")
        if not cart.is_pending:
            raise NotFound("No pending cart found for this user", {"cart_id": cart.id})

    def _write(self, snapshot: _Snapshot, cart: Cart) -> Cart:
        if snapshot.cart is None:
            return self.carts.insert(cart).entity
        return self.carts.save(cart, snapshot.cart.version).entity
