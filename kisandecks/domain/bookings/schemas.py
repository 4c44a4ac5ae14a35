"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import Booking, Expert
from ...shared.validators import validate_choice

BOOKING_CATEGORIES = ("crop", "soil", "water", "fruit-veg", "cattle")
BOOKING_MODES = ("call", "chat", "video")
PAYMENT_STATUSES = ("PENDING", "PAID", "FAILED")
EXPERT_SESSION_STATUSES = ("assigned", "in-progress", "completed")


class BookingCreate(BaseModel):
    """Schema for a farmer booking an expert consultation"""

    sessionId: Optional[str] = Field(default=None, min_length=4, max_length=20)
    name: str = Field(min_length=2, max_length=255)
    phone: str = Field(min_length=10, max_length=20)
    category: str
    mode: str
    paymentStatus: Optional[str] = None

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return validate_choice(v, BOOKING_CATEGORIES, "category")

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v):
        return validate_choice(v, BOOKING_MODES, "mode")

    @field_validator("paymentStatus")
    @classmethod
    def validate_payment_status(cls, v):
        return validate_choice(v, PAYMENT_STATUSES, "paymentStatus")


class PaymentStatusUpdate(BaseModel):
    status: Optional[str] = None


class SessionStatusUpdate(BaseModel):
    status: Optional[str] = None


class ExpertSummary(BaseModel):
    id: int
    name: str
    username: str
    phone: Optional[str] = None
    category: str
    status: str
    isActive: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, expert: Expert) -> "ExpertSummary":
        return cls(
            id=expert.id,
            name=expert.name,
            username=expert.username,
            phone=expert.phone,
            category=expert.category,
            status=expert.status,
            isActive=expert.is_active,
            createdAt=expert.created_at,
        )


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: int
    sessionId: str
    name: str
    phone: str
    category: str
    mode: str
    paymentStatus: str
    sessionStatus: str
    expertId: Optional[int] = None
    assignedAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None
    timestamp: datetime

    @classmethod
    def from_model(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            sessionId=booking.session_id,
            name=booking.name,
            phone=booking.phone,
            category=booking.category,
            mode=booking.mode,
            paymentStatus=booking.payment_status,
            sessionStatus=booking.session_status,
            expertId=booking.expert_id,
            assignedAt=booking.assigned_at,
            completedAt=booking.completed_at,
            timestamp=booking.timestamp,
        )


class BookingWithExpert(BookingResponse):
    expert: Optional[ExpertSummary] = None

    @classmethod
    def from_model(cls, booking: Booking) -> "BookingWithExpert":
        base = BookingResponse.from_model(booking).model_dump()
        expert = ExpertSummary.from_model(booking.expert) if booking.expert else None
        return cls(**base, expert=expert)
