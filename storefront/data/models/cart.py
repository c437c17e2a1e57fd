#storefront/data/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, JSON, String

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(String(36), primary_key=True)
    owner = Column(String(128), nullable=False)

    status = Column(String(20), nullable=False, default="pending")
    # product_id -> {"price": "10.00", "quantity": 3}
    lines = Column(JSON, nullable=False, default=dict)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)


# one pending cart per owner; completing a cart frees the slot
Index(
    "uq_carts_owner_pending",
    CartModel.owner,
    unique=True,
    sqlite_where=CartModel.status == "pending",
    postgresql_where=CartModel.status == "pending",
)
Index("ix_carts_owner_status", CartModel.owner, CartModel.status)
