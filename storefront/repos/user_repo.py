from typing import Optional

from storefront.data.store import USERS, DocumentStore
from storefront.domain.models import User


class UserRepo:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get_user(self, user_id: str) -> Optional[User]:
        doc = self.store.read(USERS, user_id)
        return User.from_document(doc.id, doc.value) if doc else None

    def put_user(self, user: User) -> User:
        doc = self.store.put(USERS, user.id, user.to_document())
        return User.from_document(doc.id, doc.value)
