"""Tests for consultation bookings, the expert queue and admin management"""

import re

from kisandecks.models import Booking, Expert

BOOKING = {"name": "Ramesh Kumar", "phone": "9876543210", "category": "soil", "mode": "call"}


def _create_booking(client, **overrides):
    response = client.post("/bookings", json={**BOOKING, **overrides})
    assert response.status_code == 201
    return response.json()


def _login_expert(client):
    response = client.post("/auth/expert/login", json={"username": "soilguru", "password": "expert-pass"})
    assert response.status_code == 200


class TestBookings:
    def test_create_generates_reference(self, client):
        booking = _create_booking(client)

        assert re.fullmatch(r"KD[A-Z0-9]{8}", booking["sessionId"])
        assert booking["paymentStatus"] == "PENDING"
        assert booking["sessionStatus"] == "pending"
        assert booking["expertId"] is None

    def test_client_reference_is_kept(self, client):
        booking = _create_booking(client, sessionId="KDCLIENT01", paymentStatus="PAID")

        assert booking["sessionId"] == "KDCLIENT01"
        assert client.get("/bookings/KDCLIENT01").json()["paymentStatus"] == "PAID"

    def test_duplicate_reference(self, client):
        _create_booking(client, sessionId="KDCLIENT01")

        response = client.post("/bookings", json={**BOOKING, "sessionId": "KDCLIENT01"})

        assert response.status_code == 400
        assert response.json()["error"] == "Booking already exists"

    def test_invalid_category(self, client):
        response = client.post("/bookings", json={**BOOKING, "category": "finance"})

        assert response.status_code == 400
        assert "category must be one of" in response.json()["error"]

    def test_unknown_booking(self, client):
        response = client.get("/bookings/KDMISSING0")

        assert response.status_code == 404
        assert response.json()["error"] == "Booking not found"

    def test_payment_update(self, client):
        booking = _create_booking(client)

        response = client.patch(f"/bookings/{booking['sessionId']}/payment", json={"status": "PAID"})
        assert response.json()["paymentStatus"] == "PAID"

        invalid = client.patch(f"/bookings/{booking['sessionId']}/payment", json={"status": "REFUNDED"})
        assert invalid.status_code == 400

    def test_list_newest_first(self, client):
        first = _create_booking(client)
        second = _create_booking(client)

        ids = [b["id"] for b in client.get("/bookings").json()]

        assert ids.index(second["id"]) < ids.index(first["id"])


class TestExpertQueue:
    def test_assign_and_progress(self, admin_client, approved_expert):
        booking = _create_booking(admin_client)

        assigned = admin_client.patch(f"/admin/bookings/{booking['id']}/assign", json={"expertId": approved_expert.id})
        assert assigned.status_code == 200
        assert assigned.json()["sessionStatus"] == "assigned"
        assert assigned.json()["expert"]["username"] == "soilguru"
        assert assigned.json()["assignedAt"] is not None

        _login_expert(admin_client)
        queue = admin_client.get("/expert/bookings").json()
        assert [b["id"] for b in queue] == [booking["id"]]

        started = admin_client.patch(f"/expert/bookings/{booking['id']}/status", json={"status": "in-progress"})
        assert started.json()["sessionStatus"] == "in-progress"

        done = admin_client.patch(f"/expert/bookings/{booking['id']}/status", json={"status": "completed"})
        assert done.json()["sessionStatus"] == "completed"
        assert done.json()["completedAt"] is not None

    def test_other_experts_booking_is_forbidden(self, expert_client, db):
        other = Expert(username="other", password="x", name="Other", category="crop", status="approved")
        db.add(other)
        db.commit()
        booking = _create_booking(expert_client)
        db.query(Booking).filter(Booking.id == booking["id"]).update({"expert_id": other.id})
        db.commit()

        response = expert_client.patch(f"/expert/bookings/{booking['id']}/status", json={"status": "completed"})

        assert response.status_code == 403
        assert response.json()["error"] == "Not your booking"

    def test_invalid_status(self, expert_client):
        booking = _create_booking(expert_client)

        response = expert_client.patch(f"/expert/bookings/{booking['id']}/status", json={"status": "pending"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid status"

    def test_queue_requires_expert(self, client):
        assert client.get("/expert/bookings").status_code == 401


class TestAdminExperts:
    EXPERT = {
        "username": "cropdoc",
        "password": "pass1234",
        "name": "Dr. Crop",
        "phone": "9000011111",
        "category": "crop",
    }

    def test_requires_admin(self, client):
        response = client.get("/admin/experts")

        assert response.status_code == 401
        assert response.json()["error"] == "Admin authentication required"

    def test_create_then_login_after_approval(self, admin_client, db):
        created = admin_client.post("/admin/experts", json=self.EXPERT)
        assert created.status_code == 201
        expert_id = created.json()["id"]
        assert created.json()["status"] == "pending"
        assert "password" not in created.json()
        assert db.query(Expert).filter(Expert.id == expert_id).one().password.startswith("$2")

        pending = admin_client.post("/auth/expert/login", json={"username": "cropdoc", "password": "pass1234"})
        assert pending.status_code == 403

        admin_client.post("/auth/admin/login", json={"username": "admin", "password": "admin-pass"})
        approved = admin_client.patch(f"/admin/experts/{expert_id}/status", json={"status": "approved"})
        assert approved.json()["status"] == "approved"

        login = admin_client.post("/auth/expert/login", json={"username": "cropdoc", "password": "pass1234"})
        assert login.status_code == 200

    def test_duplicate_username(self, admin_client):
        admin_client.post("/admin/experts", json=self.EXPERT)

        response = admin_client.post("/admin/experts", json=self.EXPERT)

        assert response.status_code == 400
        assert response.json()["error"] == "Username already exists"

    def test_invalid_status(self, admin_client, approved_expert):
        response = admin_client.patch(f"/admin/experts/{approved_expert.id}/status", json={"status": "archived"})

        assert response.status_code == 400

    def test_deactivate(self, admin_client, approved_expert):
        response = admin_client.patch(f"/admin/experts/{approved_expert.id}/active", json={"isActive": False})

        assert response.json()["isActive"] is False

    def test_password_reset(self, admin_client, approved_expert):
        short = admin_client.patch(f"/admin/experts/{approved_expert.id}/password", json={"password": "abc"})
        assert short.status_code == 400
        assert short.json()["error"] == "Password must be at least 4 characters"

        ok = admin_client.patch(f"/admin/experts/{approved_expert.id}/password", json={"password": "fresh-pass"})
        assert ok.json() == {"message": "Password updated"}

        login = admin_client.post("/auth/expert/login", json={"username": "soilguru", "password": "fresh-pass"})
        assert login.status_code == 200

    def test_delete(self, admin_client, approved_expert):
        response = admin_client.delete(f"/admin/experts/{approved_expert.id}")
        assert response.json() == {"message": "Expert deleted"}

        missing = admin_client.delete(f"/admin/experts/{approved_expert.id}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "Expert not found"

    def test_assign_unknown_expert(self, admin_client):
        booking = _create_booking(admin_client)

        response = admin_client.patch(f"/admin/bookings/{booking['id']}/assign", json={"expertId": 999})

        assert response.status_code == 404
        assert response.json()["error"] == "Expert not found"

    def test_assign_requires_expert_id(self, admin_client):
        booking = _create_booking(admin_client)

        response = admin_client.patch(f"/admin/bookings/{booking['id']}/assign", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "Expert is required"

    def test_refresh_prices_without_key(self, admin_client):
        response = admin_client.post("/admin/advisory/refresh-prices")

        assert response.status_code == 200
        assert response.json() == {"message": "Data refresh completed", "updated": 0}
