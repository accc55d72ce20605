"""
Tests for AccessGateMiddleware: public allow-list, token checks, revocation
"""
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from app.api.dependencies import get_catalog_service, get_identity_service, get_order_service
from app.core.auth import AccessGateMiddleware, decode_token, issue_token
from app.core.exceptions import AuthenticationError
from app.domain.user import LoginResponse
from app.services.catalog_service import CatalogService
from app.services.identity_service import IdentityService
from app.services.order_service import OrderService


@pytest.fixture
def services(app):
    catalog = MagicMock(spec=CatalogService)
    orders = MagicMock(spec=OrderService)
    identity = MagicMock(spec=IdentityService)
    catalog.list_products.return_value = []
    orders.list_orders.return_value = []
    identity.login.return_value = LoginResponse(user="jane@example.com", token="t")

    app.dependency_overrides[get_catalog_service] = lambda: catalog
    app.dependency_overrides[get_order_service] = lambda: orders
    app.dependency_overrides[get_identity_service] = lambda: identity
    return {"catalog": catalog, "orders": orders, "identity": identity}


class TestAccessGate:

    def test_protected_route_without_token(self, client, services):
        response = client.get("/api/v1/orders")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Authentication required"}
        services["orders"].list_orders.assert_not_called()

    def test_non_admin_token_is_rejected(self, client, services, user_token):
        response = client.get("/api/v1/orders", headers={"Authorization": f"Bearer {user_token}"})

        assert response.status_code == 401
        assert response.json()["error"] == "The user is not authorized"

    def test_expired_token(self, client, services, settings):
        issued = datetime.now(timezone.utc) - timedelta(days=2)
        token = issue_token(str(uuid.uuid4()), True, settings, now=issued)

        response = client.get("/api/v1/orders", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"] == "Token has expired"

    def test_token_signed_with_other_secret(self, client, services, settings):
        token = issue_token(str(uuid.uuid4()), True, settings.model_copy(update={"TOKEN_SECRET": "other"}))

        response = client.get("/api/v1/orders", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"].startswith("Invalid token")

    def test_admin_token_passes(self, client, services, admin_headers):
        response = client.get("/api/v1/orders", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == []

    def test_catalog_reads_are_public(self, client, services):
        assert client.get("/api/v1/products").status_code == 200
        assert client.get("/api/v1/products?categories=").status_code == 200

    def test_catalog_writes_are_protected(self, client, services):
        response = client.post("/api/v1/products", data={"name": "x"})

        assert response.status_code == 401
        services["catalog"].create_product.assert_not_called()

    def test_login_is_public(self, client, services):
        response = client.post("/api/v1/users/login", json={"email": "jane@example.com", "password": "s3cret"})

        assert response.status_code == 200
        assert response.json() == {"user": "jane@example.com", "token": "t"}

    def test_user_listing_is_protected(self, client, services):
        assert client.get("/api/v1/users").status_code == 401

    def test_uploads_are_public(self, client, services):
        """A missing file is a plain 404, not an auth failure"""
        assert client.get("/public/uploads/missing.png").status_code == 404

    def test_health_is_public(self, client, mock_db):
        mock_db.ping.return_value = 1.5

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"]["status"] == "connected"


class TestGateRules:
    """Allow-list and revocation predicate in isolation"""

    @pytest.mark.parametrize("method,path,public", [
        ("GET", "/api/v1/products", True),
        ("GET", "/api/v1/products/get/featured/3", True),
        ("OPTIONS", "/api/v1/categories", True),
        ("POST", "/api/v1/products", False),
        ("DELETE", "/api/v1/categories/abc", False),
        ("POST", "/api/v1/users/login", True),
        ("POST", "/api/v1/users/register", True),
        ("GET", "/api/v1/users", False),
        ("GET", "/api/v1/orders", False),
        ("GET", "/public/uploads/a.png", True),
        ("GET", "/health", True),
    ])
    def test_allow_list(self, settings, method, path, public):
        gate = AccessGateMiddleware(MagicMock(), settings=settings)

        assert gate.is_public(method, path) is public

    def test_custom_revocation_predicate(self, settings):
        gate = AccessGateMiddleware(MagicMock(), settings=settings, revoked=lambda claims: False)
        token = issue_token(str(uuid.uuid4()), False, settings)

        claims = gate.authenticate(f"Bearer {token}")

        assert claims.is_admin is False

    def test_decode_round_trip_claims(self, settings):
        user_id = str(uuid.uuid4())

        claims = decode_token(issue_token(user_id, True, settings), settings)

        assert claims.user_id == user_id
        assert claims.exp - claims.iat == settings.TOKEN_TTL_SECONDS

    def test_missing_bearer_prefix(self, settings):
        gate = AccessGateMiddleware(MagicMock(), settings=settings)

        with pytest.raises(AuthenticationError):
            gate.authenticate("Token abc")
