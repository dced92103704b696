"""Principal resolution, role guard and the /auth endpoints."""

from datetime import timedelta

import pytest
from jose import jwt

from app.core.auth.dependencies import authorize, resolve_principal
from app.core.auth.service import AuthService
from app.core.exceptions import InsufficientRole, Unauthenticated
from app.shared.constants import UserRole


class TestTokens:
    def test_token_carries_only_user_id_and_expiry(self):
        token = AuthService.create_access_token("user-1")
        claims = jwt.get_unverified_claims(token)
        assert set(claims) == {"user_id", "exp"}
        assert claims["user_id"] == "user-1"

    def test_expired_token_is_rejected(self):
        token = AuthService.create_access_token("user-1", expires_delta=timedelta(seconds=-1))
        assert AuthService.verify_token(token) is None

    def test_token_signed_with_other_key_is_rejected(self):
        token = jwt.encode({"user_id": "user-1"}, "another-key", algorithm="HS256")
        assert AuthService.verify_token(token) is None

    def test_password_hash_roundtrip(self):
        hashed = AuthService.get_password_hash("secret123")
        assert AuthService.verify_password("secret123", hashed)
        assert not AuthService.verify_password("wrong-pass", hashed)


class TestPrincipalResolver:
    def test_resolves_the_same_user_for_a_valid_token(self, db, admin):
        token = AuthService.create_access_token(admin.id)
        assert resolve_principal(token, db).id == admin.id
        assert resolve_principal(token, db).id == admin.id

    def test_missing_token(self, db):
        with pytest.raises(Unauthenticated):
            resolve_principal(None, db)

    def test_garbage_token(self, db):
        with pytest.raises(Unauthenticated):
            resolve_principal("not-a-jwt", db)

    def test_token_for_deleted_user(self, db):
        token = AuthService.create_access_token("no-such-user")
        with pytest.raises(Unauthenticated):
            resolve_principal(token, db)


class TestAuthorizationGuard:
    def test_allows_matching_role(self, admin):
        authorize(admin, {UserRole.ADMIN})

    def test_no_principal(self):
        with pytest.raises(Unauthenticated):
            authorize(None, {"admin"})

    def test_message_names_actual_and_required_roles(self, make_user):
        partner_user = make_user("p@example.com", UserRole.DELIVERY_PARTNER)
        with pytest.raises(InsufficientRole) as exc_info:
            authorize(partner_user, {UserRole.ADMIN})

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == (
            "Insufficient permissions. User role: delivery_partner, Required: admin"
        )


class TestAuthAPI:
    def test_register_and_login(self, client):
        response = client.post("/api/v1/auth/register", json={
            "email": "New.Admin@Example.com",
            "password": "admin123",
            "role": "admin"
        })
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["user"]["email"] == "new.admin@example.com"
        assert body["user"]["role"] == "admin"

        response = client.post("/api/v1/auth/login", json={
            "email": "new.admin@example.com",
            "password": "admin123"
        })
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["role"] == "admin"
        assert body["partner_info"] is None

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.status_code == 200
        assert me.json()["user"]["email"] == "new.admin@example.com"

    def test_register_duplicate_email(self, client, admin):
        response = client.post("/api/v1/auth/register", json={
            "email": "admin@example.com",
            "password": "admin123",
            "role": "admin"
        })
        assert response.status_code == 409
        assert response.json()["error_code"] == "ALREADY_EXISTS"

    def test_register_rejects_unknown_role(self, client):
        response = client.post("/api/v1/auth/register", json={
            "email": "x@example.com",
            "password": "admin123",
            "role": "superuser"
        })
        assert response.status_code == 422
        assert response.json()["error_code"] == "INVALID_ARGUMENT"

    def test_login_does_not_distinguish_unknown_email_from_wrong_password(self, client, admin):
        unknown = client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
        wrong = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "wrong-pass"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json()["message"] == wrong.json()["message"] == "Invalid email or password"
        assert unknown.json()["error_code"] == "INVALID_CREDENTIALS"

    def test_partner_login_includes_partner_info(self, client, make_partner):
        partner = make_partner("luis@example.com", name="Luis")

        response = client.post("/api/v1/auth/login", json={"email": "luis@example.com", "password": "secret123"})
        assert response.status_code == 200
        info = response.json()["partner_info"]
        assert info["id"] == partner.id
        assert info["name"] == "Luis"
        assert info["availability_status"] == "available"

    def test_me_includes_partner_location(self, client, make_partner, headers_for):
        partner = make_partner("luis@example.com", latitude=1.5, longitude=2.5)

        response = client.get("/api/v1/auth/me", headers=headers_for(partner.user_id))
        assert response.status_code == 200
        location = response.json()["partner_info"]["current_location"]
        assert location["latitude"] == 1.5
        assert location["longitude"] == 2.5

    def test_me_without_token(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "UNAUTHENTICATED"

    def test_me_with_invalid_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
