"""Tests for admin, expert and farmer authentication endpoints"""

import pytest

from kisandecks.config import SESSION_COOKIE_NAME
from kisandecks.models import Admin, Farmer

from .conftest import FARMER_PASSWORD, FARMER_PHONE


class TestFarmerRegistration:
    def test_register_starts_session(self, client, db):
        response = client.post(
            "/auth/farmer/register",
            json={"phone": "9988776655", "password": "abcd", "name": "Sita", "language": "Marathi"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["farmer"]["phone"] == "9988776655"
        assert body["farmer"]["language"] == "marathi"
        assert SESSION_COOKIE_NAME in response.cookies

        me = client.get("/auth/farmer/me")
        assert me.status_code == 200
        assert me.json()["authenticated"] is True
        assert me.json()["farmer"]["name"] == "Sita"

        stored = db.query(Farmer).filter(Farmer.phone == "9988776655").one()
        assert stored.password.startswith("$2")

    def test_duplicate_phone_rejected(self, client, farmer):
        response = client.post("/auth/farmer/register", json={"phone": FARMER_PHONE, "password": "abcd"})

        assert response.status_code == 400
        assert response.json()["error"] == "Phone number already registered"
        assert "errorHindi" in response.json()

    def test_invalid_phone_rejected(self, client):
        response = client.post("/auth/farmer/register", json={"phone": "12345", "password": "abcd"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid phone number"

    def test_short_password_rejected(self, client):
        response = client.post("/auth/farmer/register", json={"phone": "9988776655", "password": "abc"})

        assert response.status_code == 400


class TestFarmerLogin:
    def test_login_and_logout(self, client, farmer):
        response = client.post("/auth/farmer/login", json={"phone": FARMER_PHONE, "password": FARMER_PASSWORD})
        assert response.status_code == 200
        assert response.json()["farmer"]["id"] == farmer.id

        assert client.get("/auth/farmer/me").json()["authenticated"] is True

        logout = client.post("/auth/farmer/logout")
        assert logout.status_code == 200

        me = client.get("/auth/farmer/me")
        assert me.status_code == 401
        assert me.json()["authenticated"] is False

    def test_logout_twice(self, farmer_client):
        first = farmer_client.post("/auth/farmer/logout")
        second = farmer_client.post("/auth/farmer/logout")

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["success"] is True

    @pytest.mark.parametrize("role", ["farmer", "admin", "expert"])
    def test_logout_without_session(self, client, role):
        response = client.post(f"/auth/{role}/logout")

        assert response.status_code == 200

    def test_wrong_password(self, client, farmer):
        response = client.post("/auth/farmer/login", json={"phone": FARMER_PHONE, "password": "wrong"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid phone or password"

    def test_unknown_phone_gets_same_error(self, client):
        response = client.post("/auth/farmer/login", json={"phone": "9000000000", "password": "whatever"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid phone or password"

    def test_disabled_farmer(self, client, db, farmer):
        farmer.is_active = False
        db.commit()

        response = client.post("/auth/farmer/login", json={"phone": FARMER_PHONE, "password": FARMER_PASSWORD})

        assert response.status_code == 403
        assert response.json()["error"] == "Account is disabled"

    def test_legacy_plaintext_password_is_upgraded(self, client, db):
        db.add(Farmer(phone="9111111111", password="oldsecret", language="hindi"))
        db.commit()

        response = client.post("/auth/farmer/login", json={"phone": "9111111111", "password": "oldsecret"})
        assert response.status_code == 200

        db.expire_all()
        stored = db.query(Farmer).filter(Farmer.phone == "9111111111").one()
        assert stored.password.startswith("$2")

        again = client.post("/auth/farmer/login", json={"phone": "9111111111", "password": "oldsecret"})
        assert again.status_code == 200

    def test_tampered_cookie_is_anonymous(self, client, farmer):
        client.cookies.set(SESSION_COOKIE_NAME, "not-a-signed-value")

        assert client.get("/auth/farmer/me").status_code == 401


class TestFarmerProfile:
    def test_update_profile(self, farmer_client):
        response = farmer_client.put("/auth/farmer/profile", json={"village": "Rampur", "crops": "wheat,rice"})

        assert response.status_code == 200
        assert response.json()["farmer"]["village"] == "Rampur"
        assert response.json()["farmer"]["crops"] == "wheat,rice"

    def test_profile_requires_login(self, client):
        response = client.put("/auth/farmer/profile", json={"village": "Rampur"})

        assert response.status_code == 401
        assert response.json()["error"] == "Authentication required"

    def test_profile_photo_upload(self, farmer_client):
        response = farmer_client.post(
            "/auth/farmer/profile-photo",
            files={"photo": ("me.png", b"\x89PNG fake image bytes", "image/png")},
        )

        assert response.status_code == 200
        assert response.json()["profilePhoto"].startswith("/uploads/profiles/")

    def test_profile_photo_rejects_wrong_type(self, farmer_client):
        response = farmer_client.post(
            "/auth/farmer/profile-photo",
            files={"photo": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400

    def test_delete_account(self, farmer_client, db):
        response = farmer_client.delete("/auth/farmer")

        assert response.status_code == 200
        db.expire_all()
        assert db.query(Farmer).filter(Farmer.phone == FARMER_PHONE).first() is None
        assert farmer_client.get("/auth/farmer/me").status_code == 401


class TestStaffLogin:
    def test_admin_login_and_me(self, client, admin):
        response = client.post("/auth/admin/login", json={"username": "admin", "password": "admin-pass"})
        assert response.status_code == 200
        assert response.json() == {"id": admin.id, "name": "Site Admin", "username": "admin"}

        me = client.get("/auth/admin/me")
        assert me.status_code == 200
        assert me.json()["username"] == "admin"

    def test_admin_bad_password(self, client, admin):
        response = client.post("/auth/admin/login", json={"username": "admin", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    def test_admin_me_without_session(self, client):
        assert client.get("/auth/admin/me").status_code == 401

    def test_legacy_admin_password_is_upgraded(self, client, db):
        db.add(Admin(username="legacy", password="plain-pass", name="Legacy Admin"))
        db.commit()

        assert client.post("/auth/admin/login", json={"username": "legacy", "password": "plain-pass"}).status_code == 200

        db.expire_all()
        assert db.query(Admin).filter(Admin.username == "legacy").one().password.startswith("$2")

    def test_expert_login_hides_phone(self, client, approved_expert):
        response = client.post("/auth/expert/login", json={"username": "soilguru", "password": "expert-pass"})

        assert response.status_code == 200
        assert "phone" not in response.json()
        assert response.json()["category"] == "soil"

        me = client.get("/auth/expert/me")
        assert me.json()["phone"] == "9123456780"

    def test_pending_expert_cannot_login(self, client, db, approved_expert):
        approved_expert.status = "pending"
        db.commit()

        response = client.post("/auth/expert/login", json={"username": "soilguru", "password": "expert-pass"})

        assert response.status_code == 403
        assert response.json()["error"] == "Account is not approved"

    def test_inactive_expert_cannot_login(self, client, db, approved_expert):
        approved_expert.is_active = False
        db.commit()

        response = client.post("/auth/expert/login", json={"username": "soilguru", "password": "expert-pass"})

        assert response.status_code == 403
        assert response.json()["error"] == "Account is disabled"

    def test_login_replaces_previous_role(self, client, admin, farmer):
        client.post("/auth/admin/login", json={"username": "admin", "password": "admin-pass"})
        client.post("/auth/farmer/login", json={"phone": FARMER_PHONE, "password": FARMER_PASSWORD})

        assert client.get("/auth/admin/me").status_code == 401
        assert client.get("/auth/farmer/me").status_code == 200

    def test_expert_session_does_not_grant_admin(self, expert_client):
        assert expert_client.get("/admin/experts").status_code == 401
