# storefront/repos/cart_repo.py
from typing import Optional

from storefront.data.store import CARTS, DocumentStore, Document
from storefront.domain.errors import InvariantViolation
from storefront.domain.models import Cart, Versioned
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _versioned(doc: Document) -> Versioned[Cart]:
    return Versioned(entity=Cart.from_document(doc.id, doc.value), version=doc.version)


class CartRepo:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, cart_id: str) -> Optional[Versioned[Cart]]:
        doc = self.store.read(CARTS, cart_id)
        return _versioned(doc) if doc else None

    def find_pending(self, owner: str) -> Optional[Versioned[Cart]]:
        """
        The owner's pending cart, or None.

        More than one pending cart means legacy data broke the one-cart rule.
        The lowest id wins and the violation is logged; carts are never merged.
        """
        ids = self.store.query_owner_pending(owner)
        if not ids:
            return None

        if len(ids) > 1:
            violation = InvariantViolation(
                "More than one pending cart for owner",
                {"owner": owner, "cart_ids": ids, "chosen": min(ids)},
            )
            logger.error(f"Invariant violation: {violation.to_dict()}")

        cart_id = min(ids)
        found = self.get(cart_id)
        if found is None or not found.entity.is_pending:
            # completed or removed between the index query and the read
            logger.info(f"Pending cart {cart_id} for {owner} disappeared before read")
            return None
        return found

    def create(self, owner: str) -> Versioned[Cart]:
        return self.insert(Cart(owner=owner))

    def insert(self, cart: Cart) -> Versioned[Cart]:
        # raises VersionConflict when the owner already holds a pending cart
        doc = self.store.create(CARTS, cart.to_document())
        logger.info(f"Created cart {doc.id} for user {cart.owner}")
        return _versioned(doc)

    def save(self, cart: Cart, expected_version: int) -> Versioned[Cart]:
        doc = self.store.write_if(CARTS, cart.id, cart.to_document(), expected_version)
        return _versioned(doc)
