"""
Test Authentication Service and Routes
"""
import pytest
from datetime import timedelta

from app.models import Admin


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password(self):
        """Test password hashing produces different hash"""
        from app.services.auth_service import auth_service

        password = "testpassword123"
        hashed = auth_service.hash_password(password)

        assert hashed != password
        assert hashed.startswith("$2b$")  # bcrypt prefix

    def test_verify_password_correct(self, admin_password_hash):
        from app.services.auth_service import auth_service

        assert auth_service.verify_password("admin123", admin_password_hash) is True

    def test_verify_password_incorrect(self, admin_password_hash):
        from app.services.auth_service import auth_service

        assert auth_service.verify_password("wrongpassword", admin_password_hash) is False

    def test_verify_plaintext_stored_value_fails(self):
        """Legacy plaintext values are not accepted as hashes"""
        from app.services.auth_service import auth_service

        assert auth_service.verify_password("admin123", "admin123") is False


class TestJWT:
    """Test JWT token functions"""

    def test_token_payload(self):
        from app.services.auth_service import auth_service

        token = auth_service.create_access_token({"id": 1, "username": "admin", "isAdmin": True})
        decoded = auth_service.decode_token(token)

        assert decoded["id"] == 1
        assert decoded["username"] == "admin"
        assert decoded["isAdmin"] is True
        assert "exp" in decoded

    def test_decode_token_invalid(self):
        from app.services.auth_service import auth_service

        assert auth_service.decode_token("invalid.token.here") is None

    def test_expired_token(self):
        from app.services.auth_service import auth_service

        token = auth_service.create_access_token({"id": 1}, expires_delta=timedelta(seconds=-5))
        assert auth_service.decode_token(token) is None


class TestLogin:
    """Test login against the admin table"""

    def test_login_success_updates_last_login(self, test_client, admin_user, db_session):
        assert admin_user.last_login is None

        response = test_client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["token"]
        assert body["user"]["username"] == "admin"
        assert "hashed_password" not in body["user"]

        db_session.expire_all()
        assert db_session.get(Admin, admin_user.id).last_login is not None

    def test_login_wrong_password(self, test_client, admin_user):
        response = test_client.post("/api/auth/login", json={"username": "admin", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    def test_login_unknown_user(self, test_client):
        response = test_client.post("/api/auth/login", json={"username": "ghost", "password": "x"})
        assert response.status_code == 401

    def test_login_missing_fields(self, test_client):
        response = test_client.post("/api/auth/login", json={"username": "admin"})
        assert response.status_code == 400

    def test_create_default_admin_once(self, db_session):
        from app.services.auth_service import auth_service

        assert auth_service.create_default_admin("boss", "secret1") is True
        assert auth_service.create_default_admin("boss", "secret1") is False
        assert db_session.query(Admin).filter(Admin.username == "boss").count() == 1


class TestProtectedRoutes:
    """Test token and admin checks"""

    def test_profile(self, test_client, admin_headers):
        response = test_client.get("/api/auth/profile", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "admin"

    def test_profile_without_token(self, test_client):
        response = test_client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_verify_capabilities_admin(self, test_client, admin_headers):
        body = test_client.get("/api/auth/verify", headers=admin_headers).json()
        assert body["capabilities"] == {"can_view": True, "can_manage": True}

    def test_verify_capabilities_viewer(self, test_client, viewer_token):
        headers = {"Authorization": f"Bearer {viewer_token}"}
        body = test_client.get("/api/auth/verify", headers=headers).json()
        assert body["capabilities"] == {"can_view": True, "can_manage": False}

    def test_invalid_token_rejected(self, test_client):
        headers = {"Authorization": "Bearer not-a-token"}
        response = test_client.post("/api/categories", json={"name": "X"}, headers=headers)
        assert response.status_code == 401

    def test_viewer_cannot_mutate(self, test_client, viewer_token):
        headers = {"Authorization": f"Bearer {viewer_token}"}
        response = test_client.post("/api/categories", json={"name": "X"}, headers=headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Forbidden: Admin access required"
