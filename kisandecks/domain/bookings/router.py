"""Booking router - public booking endpoints and the expert's booking queue"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...sessions import require_expert
from .schemas import BookingCreate, BookingResponse, PaymentStatusUpdate, SessionStatusUpdate
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])
expert_router = APIRouter(prefix="/expert/bookings", tags=["Expert"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(data: BookingCreate, service: BookingService = Depends(get_booking_service)):
    return BookingResponse.from_model(service.create_booking(data))


@router.get("", response_model=list[BookingResponse])
async def list_bookings(service: BookingService = Depends(get_booking_service)):
    return [BookingResponse.from_model(b) for b in service.list_bookings()]


@router.get("/{session_id}", response_model=BookingResponse)
async def get_booking(session_id: str, service: BookingService = Depends(get_booking_service)):
    return BookingResponse.from_model(service.get_by_session_id(session_id))


@router.patch("/{session_id}/payment", response_model=BookingResponse)
async def update_payment_status(
    session_id: str,
    data: PaymentStatusUpdate,
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_model(service.update_payment_status(session_id, data.status))


# ============================================================================
# EXPERT QUEUE
# ============================================================================


@expert_router.get("", response_model=list[BookingResponse])
async def my_bookings(
    expert_id: int = Depends(require_expert),
    service: BookingService = Depends(get_booking_service),
):
    return [BookingResponse.from_model(b) for b in service.bookings_for_expert(expert_id)]


@expert_router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_session_status(
    booking_id: int,
    data: SessionStatusUpdate,
    expert_id: int = Depends(require_expert),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_model(service.update_session_status(booking_id, expert_id, data.status))
