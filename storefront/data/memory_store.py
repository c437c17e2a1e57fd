# storefront/data/memory_store.py
import copy
import threading
import uuid
from typing import Any, Dict, List, Optional, Tuple

from storefront.data.store import (
    CARTS,
    KINDS,
    PRODUCTS,
    Document,
    DocumentStore,
    check_kind,
    refuse_unconditioned_cart_write,
)
from storefront.domain.errors import VersionConflict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local store for tests and local runs.

    Each primitive holds the lock only for its own duration, so callers see
    the same interleavings they would against a remote store.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._docs: Dict[str, Dict[str, Document]] = {kind: {} for kind in KINDS}

    def read(self, kind: str, doc_id: str) -> Optional[Document]:
        check_kind(kind)
        with self._lock:
            doc = self._docs[kind].get(doc_id)
            return self._copy(doc) if doc else None

    def create(self, kind: str, value: Dict[str, Any], doc_id: Optional[str] = None) -> Document:
        check_kind(kind)
        doc_id = doc_id or str(uuid.uuid4())
        with self._lock:
            if doc_id in self._docs[kind]:
                raise VersionConflict(kind, doc_id)
            if kind == CARTS and value.get("status") == "pending" and self._pending_ids(value["owner"]):
                raise VersionConflict(kind, doc_id)
            doc = Document(id=doc_id, value=copy.deepcopy(value), version=1)
            self._docs[kind][doc_id] = doc
            return self._copy(doc)

    def write_if(self, kind: str, doc_id: str, value: Dict[str, Any], expected_version: int) -> Document:
        check_kind(kind)
        with self._lock:
            current = self._docs[kind].get(doc_id)
            if current is None or current.version != expected_version:
                raise VersionConflict(kind, doc_id, expected_version)
            doc = Document(id=doc_id, value=copy.deepcopy(value), version=expected_version + 1)
            self._docs[kind][doc_id] = doc
            return self._copy(doc)

    def delete_if(self, kind: str, doc_id: str, expected_version: int) -> None:
        check_kind(kind)
        with self._lock:
            current = self._docs[kind].get(doc_id)
            if current is None or current.version != expected_version:
                raise VersionConflict(kind, doc_id, expected_version)
            del self._docs[kind][doc_id]

    def put(self, kind: str, doc_id: str, value: Dict[str, Any]) -> Document:
        check_kind(kind)
        refuse_unconditioned_cart_write(kind)
        with self._lock:
            current = self._docs[kind].get(doc_id)
            version = current.version + 1 if current else 1
            doc = Document(id=doc_id, value=copy.deepcopy(value), version=version)
            self._docs[kind][doc_id] = doc
            return self._copy(doc)

    def query_owner_pending(self, owner: str) -> List[str]:
        with self._lock:
            return self._pending_ids(owner)

    def list_active_products(self, limit: int, offset: int) -> Tuple[List[Document], int]:
        with self._lock:
            active = sorted(
                (doc for doc in self._docs[PRODUCTS].values() if doc.value.get("active")),
                key=lambda doc: doc.id,
            )
            return [self._copy(doc) for doc in active[offset:offset + limit]], len(active)

    def seed(self, kind: str, doc_id: str, value: Dict[str, Any], version: int = 1) -> Document:
        """Load a record as-is, skipping every store rule (legacy data imports)."""
        check_kind(kind)
        with self._lock:
            logger.warning(f"Seeding {kind}/{doc_id} without store checks")
            doc = Document(id=doc_id, value=copy.deepcopy(value), version=version)
            self._docs[kind][doc_id] = doc
            return self._copy(doc)

    def _pending_ids(self, owner: str) -> List[str]:
        return sorted(
            doc.id
            for doc in self._docs[CARTS].values()
            if doc.value.get("owner") == owner and doc.value.get("status") == "pending"
        )

    @staticmethod
    def _copy(doc: Document) -> Document:
        return Document(id=doc.id, value=copy.deepcopy(doc.value), version=doc.version)
