"""
OTP service - one-time codes for farmer login and password reset

Each (flow, phone) pair has at most one outstanding record in the expiring
store. Records outlive their expiry by a short grace period so a late verify
is answered with "expired" instead of "not found".
"""

import hmac
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from ...config import IS_PRODUCTION, OTP_EXPIRY_MINUTES, OTP_RETENTION_GRACE_SECONDS
from ...errors import (
    AccountDisabled,
    AccountNotFound,
    NotFound,
    OtpExpired,
    OtpMismatch,
    OtpNotFound,
    OtpNotVerified,
    UpstreamError,
    ValidationError,
)
from ...models import Farmer
from ...otp_store import ExpiringStore
from ...security_utils import generate_otp, hash_password
from ...services.sms_service import SmsSender
from ...sessions import SessionManager
from ...shared.validators import is_indian_mobile
from .repository import AccountRepository
from .schemas import RESET_PASSWORD_MIN_LENGTH
from .service import FARMER_DISABLED, AuthService

logger = logging.getLogger(__name__)

LOGIN_FLOW = "login"
RESET_FLOW = "reset"

SMS_PURPOSE = {LOGIN_FLOW: "login", RESET_FLOW: "password reset"}

ACCOUNT_MISSING = {
    LOGIN_FLOW: (
        "No account found with this number. Please register first.",
        "इस नंबर से कोई खाता नहीं मिला। पहले रजिस्टर करें।",
    ),
    RESET_FLOW: ("No account found with this number", "इस नंबर से कोई खाता नहीं मिला"),
}

NOT_FOUND_MESSAGES = {
    LOGIN_FLOW: ("No OTP found. Please request a new one.", "कोई OTP नहीं मिला। नया OTP भेजें।"),
    RESET_FLOW: ("OTP expired or not found", "OTP समाप्त हो गया या नहीं मिला"),
}

EXPIRED_MESSAGES = {
    LOGIN_FLOW: ("OTP expired. Please request a new one.", "OTP समाप्त हो गया। नया OTP भेजें।"),
    RESET_FLOW: ("OTP expired", "OTP समाप्त हो गया"),
}


def otp_key(flow: str, phone: str) -> str:
    return f"otp:{flow}:{phone}"


@dataclass
class OtpReceipt:
    phone: str
    expires_at: float
    dev_otp: Optional[str] = None


class OtpService:
    """Issues, verifies and consumes one-time codes"""

    def __init__(
        self,
        db: Session,
        store: ExpiringStore,
        sms: SmsSender,
        sessions: SessionManager,
        clock: Callable[[], float] = time.time,
        expiry_seconds: int = OTP_EXPIRY_MINUTES * 60,
        expose_code: bool = not IS_PRODUCTION,
    ):
        self.db = db
        self.store = store
        self.sms = sms
        self.clock = clock
        self.expiry_seconds = expiry_seconds
        self.expose_code = expose_code
        self.repo = AccountRepository()
        self.auth = AuthService(db, sessions)

    def _store_ttl(self, expires_at: float) -> int:
        return max(1, int(expires_at - self.clock()) + OTP_RETENTION_GRACE_SECONDS)

    def _require_account(self, phone: str, flow: str) -> Farmer:
        farmer = self.repo.get_farmer_by_phone(self.db, phone)
        if not farmer:
            raise AccountNotFound(*ACCOUNT_MISSING[flow])
        return farmer

    def _load_live_record(self, phone: str, flow: str) -> dict:
        """Fetch the outstanding record; an expired one is deleted and reported"""
        key = otp_key(flow, phone)
        record = self.store.get(key)
        if not record:
            raise OtpNotFound(*NOT_FOUND_MESSAGES[flow])

        if self.clock() > record["expiresAt"]:
            self.store.delete(key)
            logger.info(f"⏰ Expired {flow} OTP discarded for {phone[-4:].rjust(10, '*')}")
            raise OtpExpired(*EXPIRED_MESSAGES[flow])
        return record

    @staticmethod
    def _codes_match(record: dict, code: str) -> bool:
        return hmac.compare_digest(str(record["code"]).encode(), str(code).strip().encode())

    # ------------------------------------------------------------------
    # Send
    # ------------------------------------------------------------------

    async def send_otp(self, phone: Optional[str], flow: str) -> OtpReceipt:
        """
        Issue a fresh code for phone, replacing any outstanding one for the same flow.

        Raises:
            ValidationError: phone is missing or not an Indian mobile number
            AccountNotFound: no farmer is registered with the phone
            UpstreamError: the SMS provider is configured but rejected the message
        """
        if not phone or not is_indian_mobile(phone):
            raise ValidationError("Invalid phone number", "गलत मोबाइल नंबर")

        self._require_account(phone, flow)

        code = generate_otp()
        expires_at = self.clock() + self.expiry_seconds
        key = otp_key(flow, phone)
        self.store.set(
            key,
            {"code": code, "expiresAt": expires_at, "verified": False},
            self._store_ttl(expires_at),
        )

        delivered, error = await self.sms.send_otp(phone, code, SMS_PURPOSE[flow])
        if not delivered and self.sms.configured:
            self.store.delete(key)
            logger.error(f"❌ Could not deliver {flow} OTP: {error}")
            raise UpstreamError("Failed to send OTP", "OTP नहीं भेजा जा सका")

        return OtpReceipt(phone=phone, expires_at=expires_at, dev_otp=code if self.expose_code else None)

    # ------------------------------------------------------------------
    # Login flow
    # ------------------------------------------------------------------

    def verify_login_otp(
        self, phone: Optional[str], code: Optional[str], previous_session_id: Optional[str] = None
    ) -> Tuple[Farmer, str]:
        """Consume a login code and start a farmer session"""
        if not phone or not code:
            raise ValidationError("Phone and OTP required", "फोन और OTP आवश्यक है")

        record = self._load_live_record(phone, LOGIN_FLOW)
        if not self._codes_match(record, code):
            raise OtpMismatch()

        # Single use: the code is gone even if the account checks below fail
        self.store.delete(otp_key(LOGIN_FLOW, phone))

        farmer = self.repo.get_farmer_by_phone(self.db, phone)
        if not farmer:
            raise AccountNotFound("Farmer not found", "किसान नहीं मिला")
        if not farmer.is_active:
            raise AccountDisabled(*FARMER_DISABLED)

        session_id = self.auth.start_farmer_session(farmer, previous_session_id)
        return farmer, session_id

    # ------------------------------------------------------------------
    # Reset flow
    # ------------------------------------------------------------------

    def verify_reset_otp(self, phone: Optional[str], code: Optional[str]) -> None:
        """Mark the reset code verified; the record stays until the reset itself"""
        if not phone or not code:
            raise ValidationError("Phone and OTP required", "फोन और OTP आवश्यक है")

        record = self._load_live_record(phone, RESET_FLOW)
        if not self._codes_match(record, code):
            raise OtpMismatch()

        record["verified"] = True
        self.store.set(otp_key(RESET_FLOW, phone), record, self._store_ttl(record["expiresAt"]))
        logger.info(f"✅ Reset OTP verified for {phone[-4:].rjust(10, '*')}")

    def reset_password(self, phone: Optional[str], code: Optional[str], new_password: Optional[str]) -> None:
        """Set a new password after a verified reset code; the code is then consumed"""
        if not phone or not code or not new_password:
            raise ValidationError("Phone, OTP and new password required", "फोन, OTP और नया पासवर्ड आवश्यक है")

        if len(new_password) < RESET_PASSWORD_MIN_LENGTH:
            raise ValidationError(
                "Password must be at least 8 characters", "पासवर्ड कम से कम 8 अक्षर का होना चाहिए"
            )

        key = otp_key(RESET_FLOW, phone)
        record = self.store.get(key)
        if not record or not record.get("verified"):
            raise OtpNotVerified()

        if self.clock() > record["expiresAt"]:
            self.store.delete(key)
            raise OtpExpired(*EXPIRED_MESSAGES[RESET_FLOW])

        if not self._codes_match(record, code):
            raise OtpMismatch()

        farmer = self.repo.get_farmer_by_phone(self.db, phone)
        if not farmer:
            raise NotFound("Farmer not found", "किसान नहीं मिला")

        self.repo.update_password(self.db, farmer, hash_password(new_password))
        self.store.delete(key)
        logger.info(f"🔐 Password reset for farmer {farmer.id}")
