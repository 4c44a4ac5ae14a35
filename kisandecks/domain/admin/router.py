"""Admin router - expert management, booking assignment, data refresh and media uploads"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ...database import get_db
from ...services.market_data import MarketDataService
from ...sessions import require_admin
from ..bookings.router import get_booking_service
from ..bookings.schemas import BookingWithExpert, ExpertSummary
from ..bookings.service import BookingService
from ..learning.router import get_learning_service
from ..learning.schemas import LearningContentResponse, UploadResponse
from ..learning.service import LearningService
from .schemas import (
    AssignExpertRequest,
    ExpertActiveUpdate,
    ExpertCreate,
    ExpertPasswordUpdate,
    ExpertStatusUpdate,
    MessageResponse,
    RefreshResponse,
)
from .service import AdminService

logger = logging.getLogger(__name__)

# Every admin route requires an admin session
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


def get_market_data_service(db: Session = Depends(get_db)) -> MarketDataService:
    """Dependency injection for MarketDataService"""
    return MarketDataService(db)


# ============================================================================
# EXPERTS
# ============================================================================


@router.get("/experts", response_model=list[ExpertSummary])
async def list_experts(service: AdminService = Depends(get_admin_service)):
    return [ExpertSummary.from_model(e) for e in service.list_experts()]


@router.post("/experts", response_model=ExpertSummary, status_code=201)
async def create_expert(data: ExpertCreate, service: AdminService = Depends(get_admin_service)):
    return ExpertSummary.from_model(service.create_expert(data))


@router.patch("/experts/{expert_id}/status", response_model=ExpertSummary)
async def update_expert_status(
    expert_id: int, data: ExpertStatusUpdate, service: AdminService = Depends(get_admin_service)
):
    return ExpertSummary.from_model(service.update_status(expert_id, data.status))


@router.patch("/experts/{expert_id}/active", response_model=ExpertSummary)
async def update_expert_active(
    expert_id: int, data: ExpertActiveUpdate, service: AdminService = Depends(get_admin_service)
):
    return ExpertSummary.from_model(service.set_active(expert_id, data.isActive))


@router.patch("/experts/{expert_id}/password", response_model=MessageResponse)
async def update_expert_password(
    expert_id: int, data: ExpertPasswordUpdate, service: AdminService = Depends(get_admin_service)
):
    service.set_password(expert_id, data.password)
    return MessageResponse(message="Password updated")


@router.delete("/experts/{expert_id}", response_model=MessageResponse)
async def delete_expert(expert_id: int, service: AdminService = Depends(get_admin_service)):
    service.delete_expert(expert_id)
    return MessageResponse(message="Expert deleted")


# ============================================================================
# BOOKINGS
# ============================================================================


@router.get("/bookings", response_model=list[BookingWithExpert])
async def list_bookings(service: BookingService = Depends(get_booking_service)):
    return [BookingWithExpert.from_model(b) for b in service.list_bookings(with_expert=True)]


@router.patch("/bookings/{booking_id}/assign", response_model=BookingWithExpert)
async def assign_expert(
    booking_id: int, data: AssignExpertRequest, service: BookingService = Depends(get_booking_service)
):
    return BookingWithExpert.from_model(service.assign_expert(booking_id, data.expertId))


# ============================================================================
# LIVE DATA
# ============================================================================


@router.post("/advisory/refresh-prices", response_model=RefreshResponse)
async def refresh_prices(service: MarketDataService = Depends(get_market_data_service)):
    logger.info("🔄 Manual market data refresh triggered by admin")
    updated = await service.refresh()
    return RefreshResponse(message="Data refresh completed", updated=updated)


# ============================================================================
# LEARNING UPLOADS
# ============================================================================


async def _upload(
    content_type: str,
    media: Optional[UploadFile],
    thumbnail: Optional[UploadFile],
    fields: dict,
    admin_id: int,
    service: LearningService,
) -> UploadResponse:
    content = await service.upload_content(content_type, media, thumbnail, fields, admin_id)
    return UploadResponse(content=LearningContentResponse.from_model(content))


@router.post("/learning/upload/video", response_model=UploadResponse)
async def upload_video(
    video: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    titleHindi: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    descriptionHindi: Optional[str] = Form(None),
    duration: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    admin_id: int = Depends(require_admin),
    service: LearningService = Depends(get_learning_service),
):
    fields = {
        "title": title,
        "titleHindi": titleHindi,
        "category": category,
        "description": description,
        "descriptionHindi": descriptionHindi,
        "duration": duration,
        "language": language,
        "tags": tags,
    }
    return await _upload("video", video, thumbnail, fields, admin_id, service)


@router.post("/learning/upload/audio", response_model=UploadResponse)
async def upload_audio(
    audio: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    titleHindi: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    descriptionHindi: Optional[str] = Form(None),
    duration: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    admin_id: int = Depends(require_admin),
    service: LearningService = Depends(get_learning_service),
):
    fields = {
        "title": title,
        "titleHindi": titleHindi,
        "category": category,
        "description": description,
        "descriptionHindi": descriptionHindi,
        "duration": duration,
        "language": language,
        "tags": tags,
    }
    return await _upload("audio", audio, thumbnail, fields, admin_id, service)
