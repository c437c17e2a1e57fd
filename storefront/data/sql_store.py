# storefront/data/sql_store.py
import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from storefront.data.models import CartModel, ProductModel, UserModel
from storefront.data.store import (
    CARTS,
    PRODUCTS,
    USERS,
    Document,
    DocumentStore,
    check_kind,
    refuse_unconditioned_cart_write,
)
from storefront.domain.errors import VersionConflict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_MODELS = {
    USERS: UserModel,
    PRODUCTS: ProductModel,
    CARTS: CartModel,
}

# columns managed by the store itself, never part of a document value
_META_COLUMNS = {"id", "version", "created_at", "updated_at"}


def _model_for(kind: str):
    check_kind(kind)
    return _MODELS[kind]


def _to_document(row) -> Document:
    value = {
        column.name: getattr(row, column.name)
        for column in row.__table__.columns
        if column.name not in _META_COLUMNS
    }
    return Document(id=row.id, value=value, version=row.version)


class SqlDocumentStore(DocumentStore):
    """
    DocumentStore on top of SQLAlchemy, one transaction per call.

    Optimistic locking is done in the UPDATE itself:
    UPDATE carts SET ..., version = 3 WHERE id = :id AND version = 2
    and 0 affected rows means somebody else wrote first.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def read(self, kind: str, doc_id: str) -> Optional[Document]:
        model = _model_for(kind)
        with self._session_factory() as session:
            row = session.get(model, doc_id)
            return _to_document(row) if row else None

    def create(self, kind: str, value: Dict[str, Any], doc_id: Optional[str] = None) -> Document:
        model = _model_for(kind)
        doc_id = doc_id or str(uuid.uuid4())
        with self._session_factory.begin() as session:
            row = model(id=doc_id, version=1, **value)
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                # duplicate id, or a second pending cart for the owner
                logger.info(f"Create {kind}/{doc_id} rejected: {exc.orig}")
                raise VersionConflict(kind, doc_id) from exc
            return _to_document(row)

    def write_if(self, kind: str, doc_id: str, value: Dict[str, Any], expected_version: int) -> Document:
        table = _model_for(kind).__table__
        with self._session_factory.begin() as session:
            try:
                result = session.execute(
                    update(table)
                    .where(table.c.id == doc_id, table.c.version == expected_version)
                    .values(version=expected_version + 1, **value)
                )
            except IntegrityError as exc:
                raise VersionConflict(kind, doc_id, expected_version) from exc
            if result.rowcount == 0:
                raise VersionConflict(kind, doc_id, expected_version)
        return Document(id=doc_id, value=dict(value), version=expected_version + 1)

    def delete_if(self, kind: str, doc_id: str, expected_version: int) -> None:
        table = _model_for(kind).__table__
        with self._session_factory.begin() as session:
            result = session.execute(
                delete(table).where(table.c.id == doc_id, table.c.version == expected_version)
            )
            if result.rowcount == 0:
                raise VersionConflict(kind, doc_id, expected_version)

    def put(self, kind: str, doc_id: str, value: Dict[str, Any]) -> Document:
        model = _model_for(kind)
        refuse_unconditioned_cart_write(kind)
        with self._session_factory.begin() as session:
            row = session.get(model, doc_id)
            if row is None:
                row = model(id=doc_id, version=1, **value)
                session.add(row)
            else:
                for key, item in value.items():
                    setattr(row, key, item)
                row.version = row.version + 1
            try:
                session.flush()
            except IntegrityError as exc:
                raise VersionConflict(kind, doc_id) from exc
            return _to_document(row)

    def query_owner_pending(self, owner: str) -> List[str]:
        with self._session_factory() as session:
            return list(
                session.scalars(
                    select(CartModel.id)
                    .where(CartModel.owner == owner, CartModel.status == "pending")
                    .order_by(CartModel.id)
                )
            )

    def list_active_products(self, limit: int, offset: int) -> Tuple[List[Document], int]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(ProductModel)
                .where(ProductModel.active.is_(True))
                .order_by(ProductModel.id)
                .offset(offset)
                .limit(limit)
            ).all()
            total = session.scalar(
                select(func.count()).select_from(ProductModel).where(ProductModel.active.is_(True))
            )
            return [_to_document(row) for row in rows], total or 0
