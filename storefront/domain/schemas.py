# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal

from storefront.domain.models import Cart, Product


class LineIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: str = Field(..., min_length=1, description="Product ID")
    quantity: int = Field(..., gt=0, description="Quantity (must be > 0)")


class QuantityIn(BaseModel):
    """Schema for setting a line quantity."""

    quantity: int = Field(..., gt=0, description="New absolute quantity (must be > 0)")


class CartLineOut(BaseModel):
    product_id: str
    price: Decimal
    quantity: int


class CartOut(BaseModel):
    """Schema for a cart (response)."""

    cart_id: str
    owner: str
    status: str
    lines: List[CartLineOut]
    total: Decimal

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartOut":
        return cls(
            cart_id=cart.id,
            owner=cart.owner,
            status=cart.status.value,
            lines=[
                CartLineOut(product_id=product_id, price=line.price, quantity=line.quantity)
                for product_id, line in cart.lines.items()
            ],
            total=cart.total,
        )


class ProductCreate(BaseModel):
    """Schema for creating a product."""

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0, description="Price (must be > 0)")
    stock: int = Field(..., gt=0, description="Stock (must be > 0)")
    active: bool = True
    brand: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)
    image_url: str = Field(..., min_length=1, description="Image reference")


class ProductUpdate(BaseModel):
    """Schema for a partial product update; omitted fields are left alone."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None
    brand: Optional[str] = Field(None, min_length=1)
    tags: Optional[List[str]] = None
    image_url: Optional[str] = Field(None, min_length=1)


class ProductOut(BaseModel):
    id: str
    title: str
    description: str
    price: Decimal
    stock: int
    active: bool
    owner: str
    brand: str
    tags: List[str]
    image_url: str

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        return cls.model_validate(product)


class ProductPage(BaseModel):
    products: List[ProductOut]
    total_count: int


class UserCreate(BaseModel):
    """Schema for creating or replacing the caller's profile."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class UserRead(BaseModel):
    id: str
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)
