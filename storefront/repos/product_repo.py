# storefront/repos/product_repo.py
from typing import List, Optional, Tuple

from storefront.data.store import PRODUCTS, Document, DocumentStore
from storefront.domain.models import Product, Versioned


def _versioned(doc: Document) -> Versioned[Product]:
    return Versioned(entity=Product.from_document(doc.id, doc.value), version=doc.version)


class ProductRepo:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, product_id: str) -> Optional[Versioned[Product]]:
        doc = self.store.read(PRODUCTS, product_id)
        return _versioned(doc) if doc else None

    def insert(self, product: Product) -> Versioned[Product]:
        return _versioned(self.store.create(PRODUCTS, product.to_document(), doc_id=product.id))

    def save(self, product: Product, expected_version: int) -> Versioned[Product]:
        doc = self.store.write_if(PRODUCTS, product.id, product.to_document(), expected_version)
        return _versioned(doc)

    def delete(self, product_id: str, expected_version: int) -> None:
        self.store.delete_if(PRODUCTS, product_id, expected_version)

    def list_active(self, limit: int, offset: int) -> Tuple[List[Product], int]:
        docs, total = self.store.list_active_products(limit, offset)
        return [Product.from_document(doc.id, doc.value) for doc in docs], total
