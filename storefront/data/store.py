# storefront/data/store.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

USERS = "users"
PRODUCTS = "products"
CARTS = "carts"

KINDS = (USERS, PRODUCTS, CARTS)


@dataclass(frozen=True)
class Document:
    id: str
    value: Dict[str, Any]
    version: int


class DocumentStore(ABC):
    """
    Versioned document store used by every repository.

    - every record carries a version, starting at 1, bumped by each write
    - write_if / delete_if are conditional on the version last read and raise
      VersionConflict when it no longer matches
    - at most one pending cart per owner; create() raises VersionConflict
      when the owner already holds one
    - carts never accept unconditioned writes (put)
    """

    @abstractmethod
    def read(self, kind: str, doc_id: str) -> Optional[Document]:
        ...

    @abstractmethod
    def create(self, kind: str, value: Dict[str, Any], doc_id: Optional[str] = None) -> Document:
        ...

    @abstractmethod
    def write_if(self, kind: str, doc_id: str, value: Dict[str, Any], expected_version: int) -> Document:
        ...

    @abstractmethod
    def delete_if(self, kind: str, doc_id: str, expected_version: int) -> None:
        ...

    @abstractmethod
    def put(self, kind: str, doc_id: str, value: Dict[str, Any]) -> Document:
        ...

    @abstractmethod
    def query_owner_pending(self, owner: str) -> List[str]:
        """Ids of the owner's pending carts, lowest first."""

    @abstractmethod
    def list_active_products(self, limit: int, offset: int) -> Tuple[List[Document], int]:
        """One page of active products ordered by id, plus the total active count."""


def check_kind(kind: str) -> None:
    if kind not in KINDS:
        raise ValueError(f"Unknown document kind: {kind}")


def refuse_unconditioned_cart_write(kind: str) -> None:
    if kind == CARTS:
        raise ValueError("carts only accept version-guarded writes")
