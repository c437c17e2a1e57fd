#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends

from storefront.api.deps import get_cart_service, get_current_user_id, unwrap
from storefront.domain.schemas import CartOut, LineIn, QuantityIn
from storefront.services.cart_service import CartService

router = APIRouter(tags=["carts"])


@router.get("/cart", response_model=CartOut)
def get_cart(
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return CartOut.from_cart(unwrap(svc.get_cart(user_id)))


@router.post("/cart/lines", response_model=CartOut)
def add_line(
    payload: LineIn,
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    cart = unwrap(svc.add_line(user_id, payload.product_id, payload.quantity))
    return CartOut.from_cart(cart)


@router.put("/cart/lines/{product_id}", response_model=CartOut)
def update_line_quantity(
    product_id: str,
    payload: QuantityIn,
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    cart = unwrap(svc.update_line_quantity(user_id, product_id, payload.quantity))
    return CartOut.from_cart(cart)


@router.delete("/cart/lines/{product_id}", response_model=CartOut)
def remove_line(
    product_id: str,
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return CartOut.from_cart(unwrap(svc.remove_line(user_id, product_id)))


@router.delete("/cart/lines", response_model=CartOut)
def clear_cart(
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return CartOut.from_cart(unwrap(svc.clear_cart(user_id)))


@router.post("/cart/checkout", response_model=CartOut)
def checkout(
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return CartOut.from_cart(unwrap(svc.checkout(user_id)))


@router.get("/carts/{cart_id}", response_model=CartOut)
def get_cart_by_id(
    cart_id: str,
    user_id: str = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return CartOut.from_cart(unwrap(svc.get_cart_by_id(user_id, cart_id)))
