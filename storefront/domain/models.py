# storefront/domain/models.py
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from storefront.domain.errors import InvalidArgument, NotFound

T = TypeVar("T")

PRODUCT_TEXT_FIELDS = ("title", "description", "brand", "image_url")


def to_decimal(value: Any, field_name: str = "price") -> Decimal:
    if isinstance(value, bool):
        raise InvalidArgument(f"{field_name} must be a number")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidArgument(f"{field_name} must be a number")


def is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


@dataclass(frozen=True)
class Versioned(Generic[T]):
    """An entity together with the store version it was read at."""

    entity: T
    version: int


class CartStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class CartLine:
    price: Decimal
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class Cart:
    """
    Cart aggregate. Every mutator returns a new Cart; the instance it is
    called on is left untouched so retries can re-run a mutation safely.
    """

    owner: str
    status: CartStatus = CartStatus.PENDING
    lines: Dict[str, CartLine] = field(default_factory=dict)
    id: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == CartStatus.PENDING

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines.values()), Decimal("0.00"))

    def line(self, product_id: str) -> CartLine:
        try:
            return self.lines[product_id]
        except KeyError:
            raise NotFound("Product not found in the cart", {"product_id": product_id})

    def add_line(self, product_id: str, price: Decimal, quantity: int) -> "Cart":
        if not is_positive_int(quantity):
            raise InvalidArgument("Quantity must be a positive integer")
        lines = dict(self.lines)
        existing = lines.get(product_id)
        if existing is not None:
            # price snapshot from the first insert is kept
            lines[product_id] = replace(existing, quantity=existing.quantity + quantity)
        else:
            lines[product_id] = CartLine(price=price, quantity=quantity)
        return replace(self, lines=lines)

    def set_quantity(self, product_id: str, quantity: int) -> "Cart":
        if not is_positive_int(quantity):
            raise InvalidArgument("Quantity must be a positive integer")
        existing = self.line(product_id)
        lines = dict(self.lines)
        lines[product_id] = replace(existing, quantity=quantity)
        return replace(self, lines=lines)

    def remove_line(self, product_id: str) -> "Cart":
        self.line(product_id)
        lines = dict(self.lines)
        del lines[product_id]
        return replace(self, lines=lines)

    def clear(self) -> "Cart":
        return replace(self, lines={})

    def complete(self) -> "Cart":
        return replace(self, status=CartStatus.COMPLETED)

    def to_document(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "status": self.status.value,
            "lines": {
                product_id: {"price": str(line.price), "quantity": line.quantity}
                for product_id, line in self.lines.items()
            },
        }

    @classmethod
    def from_document(cls, doc_id: str, value: Dict[str, Any]) -> "Cart":
        return cls(
            id=doc_id,
            owner=value["owner"],
            status=CartStatus(value["status"]),
            lines={
                product_id: CartLine(price=Decimal(str(line["price"])), quantity=int(line["quantity"]))
                for product_id, line in (value.get("lines") or {}).items()
            },
        )


@dataclass(frozen=True)
class Product:
    title: str
    description: str
    price: Decimal
    stock: int
    active: bool
    owner: str
    brand: str = ""
    tags: List[str] = field(default_factory=list)
    image_url: str = ""
    id: Optional[str] = None

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner == user_id

    @classmethod
    def create(cls, owner: str, **fields: Any) -> "Product":
        """Build a new listing. Price and stock must be strictly positive."""
        for name in PRODUCT_TEXT_FIELDS:
            if is_blank(fields.get(name)):
                raise InvalidArgument(f"{name} must be a non-empty string")
        price = to_decimal(fields.get("price"))
        if price <= 0:
            raise InvalidArgument("price must be a positive number")
        if not is_positive_int(fields.get("stock")):
            raise InvalidArgument("stock must be a positive integer")
        tags = fields.get("tags")
        return cls(
            title=fields["title"],
            description=fields["description"],
            price=price,
            stock=fields["stock"],
            active=bool(fields.get("active", True)),
            owner=owner,
            brand=fields["brand"],
            tags=list(tags) if isinstance(tags, (list, tuple)) else [],
            image_url=fields["image_url"],
        )

    def apply_changes(self, changes: Dict[str, Any]) -> "Product":
        """Return a copy with the given fields replaced. Unknown keys are rejected."""
        updates: Dict[str, Any] = {}
        for name, value in changes.items():
            if value is None:
                continue
            if name in PRODUCT_TEXT_FIELDS:
                if is_blank(value):
                    raise InvalidArgument(f"{name} must be a non-empty string")
                updates[name] = value
            elif name == "price":
                price = to_decimal(value)
                if price < 0:
                    raise InvalidArgument("price must not be negative")
                updates[name] = price
            elif name == "stock":
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    raise InvalidArgument("stock must be a non-negative integer")
                updates[name] = value
            elif name == "active":
                updates[name] = bool(value)
            elif name == "tags":
                updates[name] = list(value)
            else:
                raise InvalidArgument(f"{name} cannot be updated")
        return replace(self, **updates)

    def to_document(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "active": self.active,
            "owner": self.owner,
            "brand": self.brand,
            "tags": list(self.tags),
            "image_url": self.image_url,
        }

    @classmethod
    def from_document(cls, doc_id: str, value: Dict[str, Any]) -> "Product":
        return cls(
            id=doc_id,
            title=value["title"],
            description=value.get("description") or "",
            price=Decimal(str(value["price"])),
            stock=int(value["stock"]),
            active=bool(value["active"]),
            owner=value["owner"],
            brand=value.get("brand") or "",
            tags=list(value.get("tags") or []),
            image_url=value.get("image_url") or "",
        )


@dataclass(frozen=True)
class User:
    id: str
    first_name: str
    last_name: str

    def to_document(self) -> Dict[str, Any]:
        return {"first_name": self.first_name, "last_name": self.last_name}

    @classmethod
    def from_document(cls, doc_id: str, value: Dict[str, Any]) -> "User":
        return cls(id=doc_id, first_name=value["first_name"], last_name=value["last_name"])
