from typing import Optional

from storefront.data.store import DocumentStore
from storefront.domain.errors import InvalidArgument, NotFound
from storefront.domain.models import User, is_blank
from storefront.domain.result import returns_result
from storefront.repos.user_repo import UserRepo
from storefront.services.transaction_runner import TransactionRunner
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, store: DocumentStore, runner: Optional[TransactionRunner] = None):
        self.repo = UserRepo(store)
        self.runner = runner or TransactionRunner()

    @returns_result
    def create_user(self, user_id: str, first_name: str, last_name: str) -> User:
        for label, value in (("First name", first_name), ("Last name", last_name)):
            if is_blank(value):
                raise InvalidArgument(f"{label} must be a non-empty string")

        user = User(id=user_id, first_name=first_name, last_name=last_name)
        # create-or-replace; a racing first insert is retried as a replace
        saved = self.runner.run(lambda: None, lambda _: user, lambda _, u: self.repo.put_user(u))
        logger.info(f"User created successfully with ID: {user_id}")
        return saved

    @returns_result
    def get_user(self, user_id: str) -> User:
        user = self.repo.get_user(user_id)
        if not user:
            logger.warning(f"User not found with ID: {user_id}")
            raise NotFound("User not found", {"user_id": user_id})
        return user
