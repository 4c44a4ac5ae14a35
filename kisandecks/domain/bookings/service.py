"""Booking service - Business logic for consultation bookings"""

import logging
import secrets
import string
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import DuplicateError, Forbidden, NotFound, ValidationError
from ...models import Booking, Expert, utcnow
from .repository import BookingRepository
from .schemas import EXPERT_SESSION_STATUSES, PAYMENT_STATUSES, BookingCreate

logger = logging.getLogger(__name__)

SESSION_ID_PREFIX = "KD"
SESSION_ID_ALPHABET = string.ascii_uppercase + string.digits
SESSION_ID_LENGTH = 8


def generate_booking_session_id() -> str:
    """Public booking reference, e.g. KD7Q2M9XA1"""
    return SESSION_ID_PREFIX + "".join(secrets.choice(SESSION_ID_ALPHABET) for _ in range(SESSION_ID_LENGTH))


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()

    def _get(self, booking_id: int) -> Booking:
        booking = self.repo.get_by_id(self.db, booking_id)
        if not booking:
            raise NotFound("Booking not found", "बुकिंग नहीं मिली")
        return booking

    def create_booking(self, data: BookingCreate) -> Booking:
        session_id = data.sessionId or generate_booking_session_id()
        if self.repo.get_by_session_id(self.db, session_id):
            raise DuplicateError("Booking already exists", "यह बुकिंग पहले से मौजूद है")

        try:
            booking = self.repo.create(
                self.db,
                session_id=session_id,
                name=data.name.strip(),
                phone=data.phone.strip(),
                category=data.category,
                mode=data.mode,
                payment_status=data.paymentStatus or "PENDING",
            )
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError("Booking already exists", "यह बुकिंग पहले से मौजूद है") from e

        logger.info(f"📅 Booking {booking.session_id} created ({booking.category}/{booking.mode})")
        return booking

    def list_bookings(self, with_expert: bool = False) -> list[Booking]:
        return self.repo.get_all(self.db, with_expert=with_expert)

    def get_by_session_id(self, session_id: str) -> Booking:
        booking = self.repo.get_by_session_id(self.db, session_id)
        if not booking:
            raise NotFound("Booking not found", "बुकिंग नहीं मिली")
        return booking

    def update_payment_status(self, session_id: str, status: Optional[str]) -> Booking:
        if status not in PAYMENT_STATUSES:
            raise ValidationError("Invalid payment status", "गलत भुगतान स्थिति")
        booking = self.get_by_session_id(session_id)
        logger.info(f"💳 Booking {session_id} payment -> {status}")
        return self.repo.update(self.db, booking, payment_status=status)

    def assign_expert(self, booking_id: int, expert_id: Optional[int]) -> Booking:
        """Attach an expert to a booking and mark it assigned"""
        if not expert_id:
            raise ValidationError("Expert is required", "विशेषज्ञ चुनें")
        booking = self._get(booking_id)
        if not self.db.query(Expert).filter(Expert.id == expert_id).first():
            raise NotFound("Expert not found", "विशेषज्ञ नहीं मिला")

        logger.info(f"👨‍🌾 Booking {booking_id} assigned to expert {expert_id}")
        return self.repo.update(
            self.db, booking, expert_id=expert_id, session_status="assigned", assigned_at=utcnow()
        )

    def bookings_for_expert(self, expert_id: int) -> list[Booking]:
        return self.repo.get_by_expert(self.db, expert_id)

    def update_session_status(self, booking_id: int, expert_id: int, status: Optional[str]) -> Booking:
        """Expert progress update; only the assigned expert may change a booking"""
        if status not in EXPERT_SESSION_STATUSES:
            raise ValidationError("Invalid status", "गलत स्थिति")

        booking = self._get(booking_id)
        if booking.expert_id != expert_id:
            raise Forbidden("Not your booking", "यह बुकिंग आपकी नहीं है")

        updates = {"session_status": status}
        if status == "completed":
            updates["completed_at"] = utcnow()
        return self.repo.update(self.db, booking, **updates)
