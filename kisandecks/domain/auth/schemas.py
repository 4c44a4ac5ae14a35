"""Auth domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import Admin, Expert, Farmer
from ...shared.validators import validate_indian_phone, validate_language

REGISTER_PASSWORD_MIN_LENGTH = 4
RESET_PASSWORD_MIN_LENGTH = 8


class StaffLoginRequest(BaseModel):
    """Admin and expert login"""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class FarmerRegisterRequest(BaseModel):
    phone: str
    password: str = Field(min_length=REGISTER_PASSWORD_MIN_LENGTH)
    name: Optional[str] = Field(default=None, max_length=255)
    village: Optional[str] = Field(default=None, max_length=255)
    district: Optional[str] = Field(default=None, max_length=255)
    state: Optional[str] = Field(default=None, max_length=255)
    language: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_indian_phone(v)

    @field_validator("language")
    @classmethod
    def validate_language(cls, v):
        return validate_language(v)


class FarmerLoginRequest(BaseModel):
    phone: str = Field(min_length=1, max_length=20)
    password: str = Field(min_length=1)


class FarmerProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    village: Optional[str] = Field(default=None, max_length=255)
    district: Optional[str] = Field(default=None, max_length=255)
    state: Optional[str] = Field(default=None, max_length=255)
    language: Optional[str] = None
    crops: Optional[str] = None

    @field_validator("language")
    @classmethod
    def validate_language(cls, v):
        return validate_language(v)


# OTP requests keep every field optional so the service can answer with its own bilingual errors


class SendOtpRequest(BaseModel):
    phone: Optional[str] = None


class VerifyOtpRequest(BaseModel):
    phone: Optional[str] = None
    otp: Optional[str] = None

    @field_validator("otp", mode="before")
    @classmethod
    def coerce_numeric_otp(cls, v):
        # Some clients post the code as a JSON number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class ResetPasswordRequest(VerifyOtpRequest):
    newPassword: Optional[str] = None


class AdminPublic(BaseModel):
    id: int
    name: str
    username: str

    @classmethod
    def from_model(cls, admin: Admin) -> "AdminPublic":
        return cls(id=admin.id, name=admin.name, username=admin.username)


class ExpertPublic(BaseModel):
    id: int
    name: str
    username: str
    category: str
    phone: Optional[str] = None

    @classmethod
    def from_model(cls, expert: Expert) -> "ExpertPublic":
        return cls(
            id=expert.id,
            name=expert.name,
            username=expert.username,
            category=expert.category,
            phone=expert.phone,
        )


class FarmerPublic(BaseModel):
    """Projection returned on login and registration"""

    id: int
    name: Optional[str] = None
    phone: str
    language: str

    @classmethod
    def from_model(cls, farmer: Farmer) -> "FarmerPublic":
        return cls(id=farmer.id, name=farmer.name, phone=farmer.phone, language=farmer.language)


class FarmerDetail(FarmerPublic):
    """Projection returned by whoami"""

    village: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    crops: Optional[str] = None
    profilePhoto: Optional[str] = None

    @classmethod
    def from_model(cls, farmer: Farmer) -> "FarmerDetail":
        return cls(
            id=farmer.id,
            name=farmer.name,
            phone=farmer.phone,
            language=farmer.language,
            village=farmer.village,
            district=farmer.district,
            state=farmer.state,
            crops=farmer.crops,
            profilePhoto=farmer.profile_photo,
        )


class FarmerAuthResponse(BaseModel):
    success: bool = True
    farmer: FarmerPublic


class OtpSentResponse(BaseModel):
    success: bool = True
    message: str
    messageHindi: str
    devOtp: Optional[str] = None
