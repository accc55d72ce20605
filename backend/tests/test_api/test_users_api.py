"""
API tests for /api/v1/users
"""
import uuid
from unittest.mock import MagicMock

import pytest

from app.api.dependencies import get_identity_service
from app.core.exceptions import InvalidCredentialsError, NotFoundError
from app.domain.user import LoginResponse, User
from app.services.identity_service import IdentityService

USER_ID = uuid.UUID("55555555-5555-5555-5555-555555555555")


@pytest.fixture
def identity(app):
    service = MagicMock(spec=IdentityService)
    app.dependency_overrides[get_identity_service] = lambda: service
    return service


@pytest.fixture
def user():
    return User(id=USER_ID, name="Jane Doe", email="jane@example.com", is_admin=False)


class TestUsersApi:

    def test_login(self, client, identity):
        identity.login.return_value = LoginResponse(user="jane@example.com", token="jwt")

        response = client.post("/api/v1/users/login", json={"email": "jane@example.com", "password": "s3cret"})

        assert response.status_code == 200
        assert response.json() == {"user": "jane@example.com", "token": "jwt"}
        identity.login.assert_called_once_with("jane@example.com", "s3cret")

    def test_login_wrong_password(self, client, identity):
        identity.login.side_effect = InvalidCredentialsError("Password is Wrong")

        response = client.post("/api/v1/users/login", json={"email": "jane@example.com", "password": "x"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Password is Wrong"}

    def test_login_unknown_user(self, client, identity):
        identity.login.side_effect = NotFoundError("The user not found")

        response = client.post("/api/v1/users/login", json={"email": "nobody@example.com", "password": "x"})

        assert response.status_code == 404

    def test_register_is_public(self, client, identity, user):
        identity.register.return_value = user

        response = client.post("/api/v1/users/register", json={
            "name": "Jane Doe",
            "email": "jane@example.com",
            "password": "s3cret",
            "isAdmin": True,
        })

        assert response.status_code == 200
        assert "passwordHash" not in response.json()
        identity.register.assert_called_once()

    def test_register_rejects_bad_email(self, client, identity):
        response = client.post("/api/v1/users/register", json={
            "name": "Jane Doe",
            "email": "not-an-email",
            "password": "s3cret",
        })

        assert response.status_code == 400
        identity.register.assert_not_called()

    def test_create_user_as_admin(self, client, identity, user, admin_headers):
        identity.create_user.return_value = user

        response = client.post("/api/v1/users", json={
            "name": "Jane Doe",
            "email": "jane@example.com",
            "password": "s3cret",
            "isAdmin": True,
        }, headers=admin_headers)

        assert response.status_code == 200
        data = identity.create_user.call_args.args[0]
        assert data.is_admin is True

    def test_get_user_not_found(self, client, identity, admin_headers):
        identity.get_user.side_effect = NotFoundError("The user with given ID was not found")

        response = client.get(f"/api/v1/users/{USER_ID}", headers=admin_headers)

        assert response.status_code == 404

    def test_update_user_without_password(self, client, identity, user, admin_headers):
        identity.update_user.return_value = user

        response = client.put(f"/api/v1/users/{USER_ID}", json={"phone": "+1"}, headers=admin_headers)

        assert response.status_code == 200
        data = identity.update_user.call_args.args[1]
        assert data.password is None
        assert data.phone == "+1"

    def test_user_count(self, client, identity, admin_headers):
        identity.count_users.return_value = 2

        assert client.get("/api/v1/users/get/count", headers=admin_headers).json() == {"userCount": 2}

    def test_delete_user(self, client, identity, admin_headers):
        response = client.delete(f"/api/v1/users/{USER_ID}", headers=admin_headers)

        assert response.json() == {"success": True, "message": "the user is deleted"}

    def test_delete_missing_user(self, client, identity, admin_headers):
        identity.delete_user.side_effect = NotFoundError("user not found")

        response = client.delete(f"/api/v1/users/{USER_ID}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "user not found"}
