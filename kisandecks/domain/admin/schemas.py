"""Admin domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_choice
from ..bookings.schemas import BOOKING_CATEGORIES

EXPERT_STATUSES = ("pending", "approved", "rejected")
EXPERT_PASSWORD_MIN_LENGTH = 4


class ExpertCreate(BaseModel):
    """Schema for an admin creating an expert account"""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=EXPERT_PASSWORD_MIN_LENGTH)
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=10, max_length=20)
    category: str
    status: Optional[str] = "pending"
    isActive: bool = True

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return validate_choice(v, BOOKING_CATEGORIES, "category")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, EXPERT_STATUSES, "status")


class ExpertStatusUpdate(BaseModel):
    status: Optional[str] = None


class ExpertActiveUpdate(BaseModel):
    isActive: bool


class ExpertPasswordUpdate(BaseModel):
    password: Optional[str] = None


class AssignExpertRequest(BaseModel):
    expertId: Optional[int] = None


class MessageResponse(BaseModel):
    message: str


class RefreshResponse(MessageResponse):
    updated: int = 0
