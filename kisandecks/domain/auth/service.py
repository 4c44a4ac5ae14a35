"""Auth service - Business logic for login, registration and whoami"""

import logging
from typing import Optional, Tuple

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import (
    AccountDisabled,
    AccountNotApproved,
    DuplicateError,
    InvalidCredentials,
    NotFound,
    Unauthenticated,
    ValidationError,
)
from ...models import Admin, Expert, Farmer
from ...security_utils import hash_password, parse_credential
from ...sessions import CurrentSession, SessionManager
from ...utils.media_storage import save_upload, upload_url
from .repository import AccountRepository
from .schemas import FarmerProfileUpdate, FarmerRegisterRequest

logger = logging.getLogger(__name__)

FARMER_LOGIN_FAILED = ("Invalid phone or password", "गलत फोन नंबर या पासवर्ड")
FARMER_DISABLED = ("Account is disabled", "खाता बंद है")


class AuthService:
    """Service layer for account authentication"""

    def __init__(self, db: Session, sessions: SessionManager):
        self.db = db
        self.sessions = sessions
        self.repo = AccountRepository()

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def verify_password(self, account, secret: str) -> bool:
        """
        Check a secret against the account's stored credential.

        Legacy plaintext credentials are upgraded to a bcrypt hash on the first
        successful check.
        """
        credential = parse_credential(account.password)
        if not credential.verify(secret):
            return False

        if credential.needs_rehash:
            self.repo.update_password(self.db, account, hash_password(secret))
            logger.info(f"🔐 Upgraded stored credential for {account.__tablename__} {account.id}")
        return True

    # ------------------------------------------------------------------
    # Admin and expert
    # ------------------------------------------------------------------

    def login_admin(self, username: str, password: str, previous_session_id: Optional[str]) -> Tuple[Admin, str]:
        admin = self.repo.get_admin_by_username(self.db, username)
        if not admin or not self.verify_password(admin, password):
            logger.warning(f"⚠️ Failed admin login for {username}")
            raise InvalidCredentials()

        session_id = self.sessions.create("admin", admin.id, previous_session_id)
        logger.info(f"✅ Admin {admin.id} logged in")
        return admin, session_id

    def login_expert(self, username: str, password: str, previous_session_id: Optional[str]) -> Tuple[Expert, str]:
        expert = self.repo.get_expert_by_username(self.db, username)
        if not expert or not self.verify_password(expert, password):
            logger.warning(f"⚠️ Failed expert login for {username}")
            raise InvalidCredentials()

        if not expert.is_active:
            raise AccountDisabled()
        if expert.status != "approved":
            raise AccountNotApproved()

        session_id = self.sessions.create("expert", expert.id, previous_session_id)
        logger.info(f"✅ Expert {expert.id} logged in")
        return expert, session_id

    def whoami_admin(self, session: CurrentSession) -> Admin:
        admin_id = session.account_id("admin")
        if not admin_id:
            raise Unauthenticated()
        admin = self.repo.get_admin_by_id(self.db, admin_id)
        if not admin:
            self.sessions.destroy(session.session_id)
            raise Unauthenticated("Admin not found", "एडमिन नहीं मिला")
        return admin

    def whoami_expert(self, session: CurrentSession) -> Expert:
        expert_id = session.account_id("expert")
        if not expert_id:
            raise Unauthenticated()
        expert = self.repo.get_expert_by_id(self.db, expert_id)
        if not expert:
            self.sessions.destroy(session.session_id)
            raise Unauthenticated("Expert not found", "विशेषज्ञ नहीं मिला")
        return expert

    def logout(self, session_id: Optional[str]) -> None:
        self.sessions.destroy(session_id)

    # ------------------------------------------------------------------
    # Farmer
    # ------------------------------------------------------------------

    def register_farmer(self, data: FarmerRegisterRequest, previous_session_id: Optional[str]) -> Tuple[Farmer, str]:
        """Create a farmer account and start a session for it"""
        duplicate = DuplicateError("Phone number already registered", "यह फोन नंबर पहले से पंजीकृत है")
        if self.repo.get_farmer_by_phone(self.db, data.phone):
            raise duplicate

        try:
            farmer = self.repo.create_farmer(
                self.db,
                phone=data.phone,
                password=hash_password(data.password),
                name=data.name,
                village=data.village,
                district=data.district,
                state=data.state,
                language=data.language or "hindi",
            )
        except IntegrityError as e:
            # Concurrent registration for the same phone
            self.db.rollback()
            raise duplicate from e

        session_id = self.sessions.create("farmer", farmer.id, previous_session_id)
        logger.info(f"🌾 Registered farmer {farmer.id}")
        return farmer, session_id

    def login_farmer(self, phone: str, password: str, previous_session_id: Optional[str]) -> Tuple[Farmer, str]:
        farmer = self.repo.get_farmer_by_phone(self.db, phone)
        if not farmer or not self.verify_password(farmer, password):
            raise InvalidCredentials(*FARMER_LOGIN_FAILED)

        if not farmer.is_active:
            raise AccountDisabled(*FARMER_DISABLED)

        return farmer, self.start_farmer_session(farmer, previous_session_id)

    def start_farmer_session(self, farmer: Farmer, previous_session_id: Optional[str]) -> str:
        self.repo.touch_last_login(self.db, farmer)
        session_id = self.sessions.create("farmer", farmer.id, previous_session_id)
        logger.info(f"✅ Farmer {farmer.id} logged in")
        return session_id

    def whoami_farmer(self, session: CurrentSession) -> Farmer:
        farmer_id = session.account_id("farmer")
        if not farmer_id:
            raise Unauthenticated("Not logged in", "लॉगिन नहीं है")
        farmer = self.repo.get_farmer_by_id(self.db, farmer_id)
        if not farmer:
            self.sessions.destroy(session.session_id)
            raise Unauthenticated("Farmer not found", "किसान नहीं मिला")
        return farmer

    def get_farmer(self, farmer_id: int) -> Farmer:
        farmer = self.repo.get_farmer_by_id(self.db, farmer_id)
        if not farmer:
            raise NotFound("Farmer not found", "किसान नहीं मिला")
        return farmer

    def update_profile(self, farmer_id: int, data: FarmerProfileUpdate) -> Farmer:
        farmer = self.get_farmer(farmer_id)
        return self.repo.update_farmer(
            self.db,
            farmer,
            name=data.name,
            email=data.email,
            village=data.village,
            district=data.district,
            state=data.state,
            language=data.language,
            crops=data.crops,
        )

    async def update_photo(self, farmer_id: int, photo: Optional[UploadFile]) -> str:
        """Store a profile photo and return its public URL"""
        farmer = self.get_farmer(farmer_id)
        if photo is None or not photo.filename:
            raise ValidationError("No photo uploaded", "कोई फोटो अपलोड नहीं हुई")

        try:
            relative_path, _ = await save_upload(photo, "image", subfolder="profiles")
        except ValueError as e:
            raise ValidationError(str(e), "फोटो अपलोड नहीं हो सकी") from e

        photo_url = upload_url(relative_path)
        self.repo.update_farmer(self.db, farmer, profile_photo=photo_url)
        return photo_url

    def delete_farmer(self, farmer_id: int, session_id: Optional[str]) -> None:
        farmer = self.get_farmer(farmer_id)
        self.repo.delete_farmer(self.db, farmer)
        self.sessions.destroy(session_id)
        logger.info(f"🗑️ Deleted farmer account {farmer_id}")
