"""
Unit tests for IdentityService (login, registration, updates)
"""
import uuid
from unittest.mock import MagicMock

import pytest
from jose import jwt

from app.core.auth import build_password_context
from app.core.exceptions import InvalidCredentialsError, NotFoundError
from app.domain.user import UserCreate, UserRecord, UserUpdate
from app.repositories.user_repository import UserRepository
from app.services.identity_service import IdentityService


@pytest.fixture(scope="module")
def pwd_context():
    return build_password_context(4)


@pytest.fixture
def service(mock_db, settings, pwd_context):
    users = MagicMock(spec=UserRepository)
    return IdentityService(mock_db, settings, users=users, pwd_context=pwd_context)


@pytest.fixture
def stored_user(pwd_context):
    return UserRecord(
        id=uuid.uuid4(),
        name="Jane Doe",
        email="jane@example.com",
        password_hash=pwd_context.hash("s3cret"),
        phone="+420700000000",
        is_admin=True,
    )


class TestLogin:

    def test_valid_credentials_return_one_day_token(self, service, stored_user, settings):
        service.users.find_by_email.return_value = stored_user

        result = service.login("jane@example.com", "s3cret")

        assert result.user == "jane@example.com"
        claims = jwt.decode(result.token, settings.TOKEN_SECRET, algorithms=["HS256"])
        assert claims["userId"] == str(stored_user.id)
        assert claims["isAdmin"] is True
        assert claims["exp"] - claims["iat"] == 86400

    def test_wrong_password(self, service, stored_user):
        service.users.find_by_email.return_value = stored_user

        with pytest.raises(InvalidCredentialsError) as exc_info:
            service.login("jane@example.com", "wrong")

        assert exc_info.value.message == "Password is Wrong"

    def test_unknown_email(self, service):
        service.users.find_by_email.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            service.login("nobody@example.com", "whatever")

        assert exc_info.value.message == "The user not found"


class TestUserManagement:

    def test_create_user_stores_hash_not_password(self, service, stored_user, pwd_context):
        service.users.create.return_value = stored_user

        user = service.create_user(UserCreate(name="Jane Doe", email="jane@example.com", password="s3cret"))

        fields = service.users.create.call_args.args[0]
        assert "password" not in fields
        assert pwd_context.verify("s3cret", fields["password_hash"])
        assert not hasattr(user, "password_hash")

    def test_register_never_grants_admin(self, service, stored_user):
        service.users.create.return_value = stored_user

        service.register(UserCreate(name="Mallory", email="m@example.com", password="x", is_admin=True))

        fields = service.users.create.call_args.args[0]
        assert fields["is_admin"] is False

    def test_update_without_password_keeps_stored_hash(self, service, stored_user):
        service.users.update.return_value = stored_user

        service.update_user(str(stored_user.id), UserUpdate(name="Jane D."))

        fields = service.users.update.call_args.args[1]
        assert "password_hash" not in fields
        assert fields["name"] == "Jane D."

    def test_update_with_password_rehashes(self, service, stored_user, pwd_context):
        service.users.update.return_value = stored_user

        service.update_user(str(stored_user.id), UserUpdate(password="n3w"))

        fields = service.users.update.call_args.args[1]
        assert pwd_context.verify("n3w", fields["password_hash"])

    def test_update_missing_user(self, service):
        service.users.update.return_value = None

        with pytest.raises(NotFoundError):
            service.update_user(str(uuid.uuid4()), UserUpdate(name="x"))

    def test_get_user_hides_hash(self, service, stored_user):
        service.users.find_by_id.return_value = stored_user

        user = service.get_user(str(stored_user.id))

        assert "passwordHash" not in user.to_dict()
        assert user.email == "jane@example.com"

    def test_delete_user(self, service):
        user_id = uuid.uuid4()
        service.users.delete.return_value = True

        service.delete_user(str(user_id))

        service.users.delete.assert_called_once_with(user_id)

    def test_delete_missing_user(self, service):
        service.users.delete.return_value = False

        with pytest.raises(NotFoundError) as exc_info:
            service.delete_user(str(uuid.uuid4()))

        assert exc_info.value.message == "user not found"
