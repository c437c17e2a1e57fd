from fastapi import APIRouter, Depends

from storefront.api.deps import get_current_user_id, get_user_service, unwrap
from storefront.domain.schemas import UserCreate, UserRead
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

@router.put("/me", response_model=UserRead)
def create_user(
    payload: UserCreate,
    user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    return UserRead.model_validate(unwrap(service.create_user(user_id, payload.first_name, payload.last_name)))

@router.get("/me", response_model=UserRead)
def get_user(
    user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    return UserRead.model_validate(unwrap(service.get_user(user_id)))
