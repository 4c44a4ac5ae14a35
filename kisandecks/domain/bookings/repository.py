"""Booking repository - Database operations for consultation bookings"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_all(db: Session, with_expert: bool = False) -> list[Booking]:
        query = db.query(Booking)
        if with_expert:
            query = query.options(joinedload(Booking.expert))
        return query.order_by(Booking.timestamp.desc(), Booking.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, booking_id: int) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_by_session_id(db: Session, session_id: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.session_id == session_id).first()

    @staticmethod
    def get_by_expert(db: Session, expert_id: int) -> list[Booking]:
        return (
            db.query(Booking)
            .filter(Booking.expert_id == expert_id)
            .order_by(Booking.timestamp.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def create(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def update(db: Session, booking: Booking, **updates) -> Booking:
        for key, value in updates.items():
            if hasattr(booking, key):
                setattr(booking, key, value)
        db.commit()
        db.refresh(booking)
        return booking
