import pytest

from storefront.domain.errors import ErrorCode
from storefront.domain.models import User


class TestUserService:
    def test_create_and_get(self, user_service):
        created = user_service.create_user("u1", "Ada", "Lovelace").unwrap()

        assert created == User(id="u1", first_name="Ada", last_name="Lovelace")
        assert user_service.get_user("u1").unwrap() == created

    def test_create_replaces_existing_profile(self, user_service):
        user_service.create_user("u1", "Ada", "Lovelace").unwrap()
        user_service.create_user("u1", "Ada", "King").unwrap()

        assert user_service.get_user("u1").unwrap().last_name == "King"

    @pytest.mark.parametrize("first, last", [("", "Lovelace"), ("Ada", "  "), (None, "Lovelace")])
    def test_blank_names_are_rejected(self, user_service, first, last):
        result = user_service.create_user("u1", first, last)

        assert result.error.code == ErrorCode.INVALID_ARGUMENT
        assert user_service.get_user("u1").error.code == ErrorCode.NOT_FOUND

    def test_unknown_user(self, user_service):
        result = user_service.get_user("ghost")

        assert not result.ok
        assert result.error.code == ErrorCode.NOT_FOUND
        assert result.error.details == {"user_id": "ghost"}
