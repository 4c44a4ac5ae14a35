"""Auth router - FastAPI endpoints for admin, expert and farmer authentication"""

import logging
import time
from typing import Callable, Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...config import OTP_SEND_RATE_LIMIT, OTP_SEND_RATE_WINDOW_SECONDS
from ...database import get_db
from ...errors import Unauthenticated
from ...otp_store import ExpiringStore, get_store
from ...rate_limiter import create_rate_limiter
from ...services.sms_service import SmsSender, get_sms_sender
from ...sessions import (
    CurrentSession,
    SessionManager,
    attach_session_cookie,
    clear_session_cookie,
    get_current_session,
    get_session_manager,
    require_farmer,
)
from .otp_service import LOGIN_FLOW, RESET_FLOW, OtpReceipt, OtpService
from .schemas import (
    AdminPublic,
    ExpertPublic,
    FarmerAuthResponse,
    FarmerDetail,
    FarmerLoginRequest,
    FarmerProfileUpdate,
    FarmerPublic,
    FarmerRegisterRequest,
    OtpSentResponse,
    ResetPasswordRequest,
    SendOtpRequest,
    StaffLoginRequest,
    VerifyOtpRequest,
)
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

rate_limit_otp_send = create_rate_limiter(
    limit=OTP_SEND_RATE_LIMIT, window_seconds=OTP_SEND_RATE_WINDOW_SECONDS, key_prefix="otp_send"
)


def get_auth_service(
    db: Session = Depends(get_db), sessions: SessionManager = Depends(get_session_manager)
) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(db, sessions)


def get_otp_clock() -> Callable[[], float]:
    """Clock used for OTP expiry; overridden in tests"""
    return time.time


def get_otp_service(
    db: Session = Depends(get_db),
    store: ExpiringStore = Depends(get_store),
    sms: SmsSender = Depends(get_sms_sender),
    sessions: SessionManager = Depends(get_session_manager),
    clock: Callable[[], float] = Depends(get_otp_clock),
) -> OtpService:
    """Dependency injection for OtpService"""
    return OtpService(db, store, sms, sessions, clock=clock)


def _otp_sent(receipt: OtpReceipt) -> OtpSentResponse:
    return OtpSentResponse(
        message="OTP sent to your mobile",
        messageHindi="OTP आपके मोबाइल पर भेजा गया",
        devOtp=receipt.dev_otp,
    )


# ============================================================================
# ADMIN
# ============================================================================


@router.post("/admin/login", response_model=AdminPublic)
async def admin_login(
    data: StaffLoginRequest,
    response: Response,
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    admin, session_id = service.login_admin(data.username, data.password, session.session_id)
    attach_session_cookie(response, session_id)
    return AdminPublic.from_model(admin)


@router.post("/admin/logout")
async def admin_logout(
    response: Response,
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    service.logout(session.session_id)
    clear_session_cookie(response)
    return {"message": "Logged out"}


@router.get("/admin/me", response_model=AdminPublic)
async def admin_me(
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    return AdminPublic.from_model(service.whoami_admin(session))


# ============================================================================
# EXPERT
# ============================================================================


@router.post("/expert/login", response_model=ExpertPublic, response_model_exclude={"phone"})
async def expert_login(
    data: StaffLoginRequest,
    response: Response,
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    expert, session_id = service.login_expert(data.username, data.password, session.session_id)
    attach_session_cookie(response, session_id)
    return ExpertPublic.from_model(expert)


@router.post("/expert/logout")
async def expert_logout(
    response: Response,
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    service.logout(session.session_id)
    clear_session_cookie(response)
    return {"message": "Logged out"}


@router.get("/expert/me", response_model=ExpertPublic)
async def expert_me(
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    return ExpertPublic.from_model(service.whoami_expert(session))


# ============================================================================
# FARMER
# ============================================================================


@router.post("/farmer/register", response_model=FarmerAuthResponse, status_code=201)
async def farmer_register(
    data: FarmerRegisterRequest,
    response: Response,
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    farmer, session_id = service.register_farmer(data, session.session_id)
    attach_session_cookie(response, session_id)
    return FarmerAuthResponse(farmer=FarmerPublic.from_model(farmer))


@router.post("/farmer/login", response_model=FarmerAuthResponse)
async def farmer_login(
    data: FarmerLoginRequest,
    response: Response,
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    farmer, session_id = service.login_farmer(data.phone, data.password, session.session_id)
    attach_session_cookie(response, session_id)
    return FarmerAuthResponse(farmer=FarmerPublic.from_model(farmer))


@router.post("/farmer/logout")
async def farmer_logout(
    response: Response,
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    service.logout(session.session_id)
    clear_session_cookie(response)
    return {"success": True, "message": "Logged out"}


@router.get("/farmer/me")
async def farmer_me(
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    try:
        farmer = service.whoami_farmer(session)
    except Unauthenticated:
        unauthenticated = JSONResponse(
            status_code=401,
            content={"authenticated": False, "message": "Not logged in", "messageHindi": "लॉगिन नहीं है"},
        )
        clear_session_cookie(unauthenticated)
        return unauthenticated

    return {"authenticated": True, "farmer": FarmerDetail.from_model(farmer).model_dump()}


@router.put("/farmer/profile")
async def update_farmer_profile(
    data: FarmerProfileUpdate,
    farmer_id: int = Depends(require_farmer),
    service: AuthService = Depends(get_auth_service),
):
    farmer = service.update_profile(farmer_id, data)
    return {"success": True, "message": "Profile updated", "farmer": FarmerDetail.from_model(farmer).model_dump()}


@router.post("/farmer/profile-photo")
async def upload_profile_photo(
    photo: Optional[UploadFile] = File(None),
    farmer_id: int = Depends(require_farmer),
    service: AuthService = Depends(get_auth_service),
):
    photo_url = await service.update_photo(farmer_id, photo)
    return {"success": True, "profilePhoto": photo_url}


@router.delete("/farmer")
async def delete_farmer_account(
    response: Response,
    farmer_id: int = Depends(require_farmer),
    session: CurrentSession = Depends(get_current_session),
    service: AuthService = Depends(get_auth_service),
):
    service.delete_farmer(farmer_id, session.session_id)
    clear_session_cookie(response)
    return {"success": True, "message": "Account deleted"}


# ============================================================================
# FARMER OTP
# ============================================================================


@router.post("/farmer/login/send-otp", response_model=OtpSentResponse, response_model_exclude_none=True)
async def send_login_otp(
    data: SendOtpRequest,
    _: None = Depends(rate_limit_otp_send),
    service: OtpService = Depends(get_otp_service),
):
    receipt = await service.send_otp(data.phone, LOGIN_FLOW)
    return _otp_sent(receipt)


@router.post("/farmer/login/verify-otp", response_model=FarmerAuthResponse)
async def verify_login_otp(
    data: VerifyOtpRequest,
    response: Response,
    session: CurrentSession = Depends(get_current_session),
    service: OtpService = Depends(get_otp_service),
):
    farmer, session_id = service.verify_login_otp(data.phone, data.otp, session.session_id)
    attach_session_cookie(response, session_id)
    return FarmerAuthResponse(farmer=FarmerPublic.from_model(farmer))


@router.post(
    "/farmer/forgot-password/send-otp", response_model=OtpSentResponse, response_model_exclude_none=True
)
async def send_reset_otp(
    data: SendOtpRequest,
    _: None = Depends(rate_limit_otp_send),
    service: OtpService = Depends(get_otp_service),
):
    receipt = await service.send_otp(data.phone, RESET_FLOW)
    return _otp_sent(receipt)


@router.post("/farmer/forgot-password/verify-otp")
async def verify_reset_otp(data: VerifyOtpRequest, service: OtpService = Depends(get_otp_service)):
    service.verify_reset_otp(data.phone, data.otp)
    return {"success": True, "message": "OTP verified", "messageHindi": "OTP सत्यापित"}


@router.post("/farmer/forgot-password/reset")
async def reset_password(data: ResetPasswordRequest, service: OtpService = Depends(get_otp_service)):
    service.reset_password(data.phone, data.otp, data.newPassword)
    return {
        "success": True,
        "message": "Password reset successful",
        "messageHindi": "पासवर्ड सफलतापूर्वक बदल गया",
    }
