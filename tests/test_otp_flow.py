"""Tests for OTP login and password reset flows"""

from unittest.mock import patch

import pytest

from kisandecks.domain.auth.otp_service import otp_key

from .conftest import FARMER_PASSWORD, FARMER_PHONE

LOGIN_SEND = "/auth/farmer/login/send-otp"
LOGIN_VERIFY = "/auth/farmer/login/verify-otp"
RESET_SEND = "/auth/farmer/forgot-password/send-otp"
RESET_VERIFY = "/auth/farmer/forgot-password/verify-otp"
RESET = "/auth/farmer/forgot-password/reset"


@pytest.fixture
def fixed_codes():
    """Deterministic codes, one per send"""
    with patch("kisandecks.domain.auth.otp_service.generate_otp", side_effect=["111111", "222222", "333333"]):
        yield


class TestSendOtp:
    def test_send_returns_dev_code(self, client, farmer, store):
        response = client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "OTP sent to your mobile"
        assert len(body["devOtp"]) == 6
        assert 100000 <= int(body["devOtp"]) <= 999999
        assert store.get(otp_key("login", FARMER_PHONE))["code"] == body["devOtp"]

    @pytest.mark.parametrize("phone", [None, "", "12345", "5876543210", "+919876543210"])
    def test_invalid_phone(self, client, phone):
        response = client.post(LOGIN_SEND, json={"phone": phone})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid phone number"

    def test_unknown_phone_login(self, client):
        response = client.post(LOGIN_SEND, json={"phone": "9000000001"})

        assert response.status_code == 404
        assert response.json()["error"] == "No account found with this number. Please register first."

    def test_unknown_phone_reset(self, client):
        response = client.post(RESET_SEND, json={"phone": "9000000001"})

        assert response.status_code == 404
        assert response.json()["error"] == "No account found with this number"

    def test_flows_are_independent(self, client, farmer, store, fixed_codes):
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})
        client.post(RESET_SEND, json={"phone": FARMER_PHONE})

        assert store.get(otp_key("login", FARMER_PHONE))["code"] == "111111"
        assert store.get(otp_key("reset", FARMER_PHONE))["code"] == "222222"


class TestLoginOtp:
    def test_verify_starts_session(self, client, farmer, fixed_codes):
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})

        response = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})

        assert response.status_code == 200
        assert response.json()["farmer"]["id"] == farmer.id
        assert client.get("/auth/farmer/me").json()["authenticated"] is True

    def test_numeric_code_accepted(self, client, farmer, fixed_codes):
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})

        response = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": 111111})

        assert response.status_code == 200

    def test_code_is_single_use(self, client, farmer, fixed_codes):
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})
        assert client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"}).status_code == 200

        again = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})

        assert again.status_code == 400
        assert again.json()["error"] == "No OTP found. Please request a new one."

    def test_mismatch_keeps_code(self, client, farmer, fixed_codes):
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})

        wrong = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "999999"})
        assert wrong.status_code == 400
        assert wrong.json()["error"] == "Invalid OTP"

        right = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})
        assert right.status_code == 200

    def test_resend_replaces_previous_code(self, client, farmer, fixed_codes):
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})

        old = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})
        assert old.json()["error"] == "Invalid OTP"

        new = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "222222"})
        assert new.status_code == 200

    def test_expired_code(self, client, farmer, clock, fixed_codes):
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})
        clock.advance(10 * 60 + 1)

        expired = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})
        assert expired.status_code == 400
        assert expired.json()["error"] == "OTP expired. Please request a new one."

        # The expired record is discarded on first sight
        gone = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})
        assert gone.json()["error"] == "No OTP found. Please request a new one."

    def test_code_valid_until_expiry(self, client, farmer, clock, fixed_codes):
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})
        clock.advance(10 * 60)

        response = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})

        assert response.status_code == 200

    def test_missing_fields(self, client):
        response = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE})

        assert response.status_code == 400
        assert response.json()["error"] == "Phone and OTP required"

    def test_disabled_farmer_consumes_code(self, client, db, farmer, store, fixed_codes):
        client.post(LOGIN_SEND, json={"phone": FARMER_PHONE})
        farmer.is_active = False
        db.commit()

        response = client.post(LOGIN_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})

        assert response.status_code == 403
        assert store.get(otp_key("login", FARMER_PHONE)) is None


class TestPasswordReset:
    def test_full_reset(self, client, farmer, store, fixed_codes):
        client.post(RESET_SEND, json={"phone": FARMER_PHONE})

        verified = client.post(RESET_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})
        assert verified.status_code == 200
        assert verified.json()["message"] == "OTP verified"

        reset = client.post(RESET, json={"phone": FARMER_PHONE, "otp": "111111", "newPassword": "naya-password"})
        assert reset.status_code == 200
        assert reset.json()["message"] == "Password reset successful"
        assert store.get(otp_key("reset", FARMER_PHONE)) is None

        old = client.post("/auth/farmer/login", json={"phone": FARMER_PHONE, "password": FARMER_PASSWORD})
        assert old.status_code == 401
        new = client.post("/auth/farmer/login", json={"phone": FARMER_PHONE, "password": "naya-password"})
        assert new.status_code == 200

    def test_reset_requires_verification(self, client, farmer, fixed_codes):
        client.post(RESET_SEND, json={"phone": FARMER_PHONE})

        response = client.post(RESET, json={"phone": FARMER_PHONE, "otp": "111111", "newPassword": "naya-password"})

        assert response.status_code == 400
        assert response.json()["error"] == "Please verify OTP first"

    def test_short_new_password(self, client, farmer, fixed_codes):
        client.post(RESET_SEND, json={"phone": FARMER_PHONE})
        client.post(RESET_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})

        response = client.post(RESET, json={"phone": FARMER_PHONE, "otp": "111111", "newPassword": "short"})

        assert response.status_code == 400
        assert response.json()["error"] == "Password must be at least 8 characters"

    def test_reset_code_must_match(self, client, farmer, fixed_codes):
        client.post(RESET_SEND, json={"phone": FARMER_PHONE})
        client.post(RESET_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})

        response = client.post(RESET, json={"phone": FARMER_PHONE, "otp": "000000", "newPassword": "naya-password"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid OTP"

    def test_verified_code_still_expires(self, client, farmer, clock, fixed_codes):
        client.post(RESET_SEND, json={"phone": FARMER_PHONE})
        client.post(RESET_VERIFY, json={"phone": FARMER_PHONE, "otp": "111111"})
        clock.advance(11 * 60)

        response = client.post(RESET, json={"phone": FARMER_PHONE, "otp": "111111", "newPassword": "naya-password"})

        assert response.status_code == 400
        assert response.json()["error"] == "OTP expired"

    def test_unknown_reset_code(self, client, farmer):
        response = client.post(RESET_VERIFY, json={"phone": FARMER_PHONE, "otp": "123456"})

        assert response.status_code == 400
        assert response.json()["error"] == "OTP expired or not found"

    def test_missing_reset_fields(self, client):
        response = client.post(RESET, json={"phone": FARMER_PHONE, "otp": "111111"})

        assert response.status_code == 400
        assert response.json()["error"] == "Phone, OTP and new password required"
