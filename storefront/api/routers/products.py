# storefront/api/routers/products.py
from fastapi import APIRouter, Depends, Query, Response

from storefront.api.deps import get_current_user_id, get_product_service, unwrap
from storefront.domain.schemas import ProductCreate, ProductOut, ProductPage, ProductUpdate
from storefront.services.product_service import ProductService
from storefront.utils.settings import PRODUCTS_PAGE_LIMIT

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    user_id: str = Depends(get_current_user_id),
    svc: ProductService = Depends(get_product_service),
):
    product = unwrap(svc.create_product(user_id, **payload.model_dump()))
    return ProductOut.from_product(product)


@router.get("", response_model=ProductPage)
def list_products(
    limit: int = Query(PRODUCTS_PAGE_LIMIT, gt=0, le=100),
    offset: int = Query(0, ge=0),
    svc: ProductService = Depends(get_product_service),
):
    products, total = unwrap(svc.list_products(limit=limit, offset=offset))
    return ProductPage(
        products=[ProductOut.from_product(p) for p in products],
        total_count=total,
    )


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: str,
    user_id: str = Depends(get_current_user_id),
    svc: ProductService = Depends(get_product_service),
):
    return ProductOut.from_product(unwrap(svc.get_product(user_id, product_id)))


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    user_id: str = Depends(get_current_user_id),
    svc: ProductService = Depends(get_product_service),
):
    changes = payload.model_dump(exclude_unset=True)
    return ProductOut.from_product(unwrap(svc.update_product(user_id, product_id, changes)))


@router.delete("/{product_id}", status_code=204)
def remove_product(
    product_id: str,
    user_id: str = Depends(get_current_user_id),
    svc: ProductService = Depends(get_product_service),
):
    unwrap(svc.remove_product(user_id, product_id))
    return Response(status_code=204)
