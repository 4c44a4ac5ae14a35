"""Learning domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ...models import ContentShare, LearningContent, LearningProgress, Workshop, WorkshopRegistration
from ...shared.validators import validate_choice

CONTENT_TYPES = ("video", "audio")
SHAREABLE_TYPES = ("video", "audio", "workshop")
WORKSHOP_JOIN_METHODS = ("youtube", "meet", "zoom")
WORKSHOP_STATUSES = ("upcoming", "live", "completed", "cancelled")


class LearningContentCreate(BaseModel):
    """Metadata-only content record; media uploads go through the admin upload endpoints"""

    type: str
    title: str = Field(min_length=1, max_length=200)
    titleHindi: Optional[str] = Field(default=None, max_length=200)
    category: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None
    descriptionHindi: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    language: Optional[str] = "hindi"
    thumbnailPath: Optional[str] = None
    filePath: str = Field(min_length=1)
    fileSize: Optional[int] = Field(default=None, ge=0)
    mimeType: Optional[str] = None
    transcript: Optional[str] = None
    tags: Optional[str] = None
    isDownloadable: bool = True

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return validate_choice(v, CONTENT_TYPES, "type")


class LearningContentResponse(BaseModel):
    id: int
    type: str
    title: str
    titleHindi: Optional[str] = None
    category: str
    description: Optional[str] = None
    descriptionHindi: Optional[str] = None
    duration: Optional[int] = None
    language: Optional[str] = None
    thumbnailPath: Optional[str] = None
    filePath: str
    fileSize: Optional[int] = None
    mimeType: Optional[str] = None
    transcript: Optional[str] = None
    tags: Optional[str] = None
    isDownloadable: bool
    viewCount: int
    likeCount: int
    downloadCount: int
    isActive: bool
    uploadedByAdminId: Optional[int] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, content: LearningContent) -> "LearningContentResponse":
        return cls(
            id=content.id,
            type=content.type,
            title=content.title,
            titleHindi=content.title_hindi,
            category=content.category,
            description=content.description,
            descriptionHindi=content.description_hindi,
            duration=content.duration,
            language=content.language,
            thumbnailPath=content.thumbnail_path,
            filePath=content.file_path,
            fileSize=content.file_size,
            mimeType=content.mime_type,
            transcript=content.transcript,
            tags=content.tags,
            isDownloadable=content.is_downloadable,
            viewCount=content.view_count or 0,
            likeCount=content.like_count or 0,
            downloadCount=content.download_count or 0,
            isActive=content.is_active,
            uploadedByAdminId=content.uploaded_by_admin_id,
            createdAt=content.created_at,
        )


class UploadResponse(BaseModel):
    success: bool = True
    content: LearningContentResponse


# ============================================================================
# SHARES
# ============================================================================


class ShareCreate(BaseModel):
    contentId: Optional[int] = None
    contentType: Optional[str] = None


class ShareCreatedResponse(BaseModel):
    success: bool = True
    shareUrl: str
    expiresAt: datetime

    @classmethod
    def from_model(cls, share: ContentShare) -> "ShareCreatedResponse":
        return cls(shareUrl=f"/learning/share/{share.share_token}", expiresAt=share.expires_at)


class ShareLookupResponse(BaseModel):
    valid: bool = True
    contentId: int
    contentType: str


# ============================================================================
# WORKSHOPS
# ============================================================================


class WorkshopCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    titleHindi: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    descriptionHindi: Optional[str] = None
    category: str = Field(min_length=1, max_length=50)
    trainerName: str = Field(min_length=1, max_length=100)
    trainerNameHindi: Optional[str] = Field(default=None, max_length=100)
    scheduledAt: datetime
    durationMinutes: int = Field(default=60, gt=0)
    language: Optional[str] = "hindi"
    maxSeats: int = Field(default=100, gt=0)
    joinLink: Optional[str] = None
    joinMethod: Optional[str] = "youtube"
    thumbnailUrl: Optional[str] = None
    recordingUrl: Optional[str] = None
    status: Optional[str] = "upcoming"

    @field_validator("joinMethod")
    @classmethod
    def validate_join_method(cls, v):
        return validate_choice(v, WORKSHOP_JOIN_METHODS, "joinMethod")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, WORKSHOP_STATUSES, "status")


class WorkshopResponse(BaseModel):
    id: int
    title: str
    titleHindi: Optional[str] = None
    description: Optional[str] = None
    descriptionHindi: Optional[str] = None
    category: str
    trainerName: str
    trainerNameHindi: Optional[str] = None
    scheduledAt: datetime
    durationMinutes: Optional[int] = None
    language: Optional[str] = None
    maxSeats: Optional[int] = None
    registeredCount: int
    joinLink: Optional[str] = None
    joinMethod: Optional[str] = None
    thumbnailUrl: Optional[str] = None
    recordingUrl: Optional[str] = None
    status: Optional[str] = None
    isActive: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, workshop: Workshop) -> "WorkshopResponse":
        return cls(
            id=workshop.id,
            title=workshop.title,
            titleHindi=workshop.title_hindi,
            description=workshop.description,
            descriptionHindi=workshop.description_hindi,
            category=workshop.category,
            trainerName=workshop.trainer_name,
            trainerNameHindi=workshop.trainer_name_hindi,
            scheduledAt=workshop.scheduled_at,
            durationMinutes=workshop.duration_minutes,
            language=workshop.language,
            maxSeats=workshop.max_seats,
            registeredCount=workshop.registered_count or 0,
            joinLink=workshop.join_link,
            joinMethod=workshop.join_method,
            thumbnailUrl=workshop.thumbnail_url,
            recordingUrl=workshop.recording_url,
            status=workshop.status,
            isActive=workshop.is_active,
            createdAt=workshop.created_at,
        )


class WorkshopRegisterRequest(BaseModel):
    # Loosely typed so a missing or non-string name gets the bilingual 400
    farmerName: Any = None
    farmerPhone: Optional[str] = None


class RegistrationResponse(BaseModel):
    id: int
    workshopId: int
    farmerId: str
    farmerName: Optional[str] = None
    farmerPhone: Optional[str] = None
    attended: bool = False
    registeredAt: datetime

    @classmethod
    def from_model(cls, registration: WorkshopRegistration) -> "RegistrationResponse":
        return cls(
            id=registration.id,
            workshopId=registration.workshop_id,
            farmerId=registration.farmer_id,
            farmerName=registration.farmer_name,
            farmerPhone=registration.farmer_phone,
            attended=bool(registration.attended),
            registeredAt=registration.registered_at,
        )


class WorkshopRegisterResponse(BaseModel):
    success: bool = True
    registration: RegistrationResponse


# ============================================================================
# PROGRESS
# ============================================================================


class BookmarkRequest(BaseModel):
    contentId: Any = None
    contentType: Any = None


class BookmarkResponse(BaseModel):
    success: bool = True
    isBookmarked: bool


class ProgressUpdate(BaseModel):
    """Player heartbeat; non-numeric counters fall back to zero"""

    contentId: Any = None
    contentType: Any = None
    watchedSeconds: Any = None
    totalSeconds: Any = None
    completedPercent: Any = None
    isCompleted: Any = None


class ProgressResponse(BaseModel):
    id: int
    farmerId: str
    contentId: int
    contentType: str
    watchedSeconds: int = 0
    totalSeconds: int = 0
    completedPercent: int = 0
    isCompleted: bool = False
    isBookmarked: bool = False
    isDownloaded: bool = False
    lastWatchedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, progress: LearningProgress) -> "ProgressResponse":
        return cls(
            id=progress.id,
            farmerId=progress.farmer_id,
            contentId=progress.content_id,
            contentType=progress.content_type,
            watchedSeconds=progress.watched_seconds or 0,
            totalSeconds=progress.total_seconds or 0,
            completedPercent=progress.completed_percent or 0,
            isCompleted=bool(progress.is_completed),
            isBookmarked=bool(progress.is_bookmarked),
            isDownloaded=bool(progress.is_downloaded),
            lastWatchedAt=progress.last_watched_at,
            createdAt=progress.created_at,
        )


class ProgressUpdateResponse(BaseModel):
    success: bool = True
    progress: ProgressResponse


class BookmarkedItem(ProgressResponse):
    title: str
    titleHindi: Optional[str] = None
    thumbnailPath: Optional[str] = None
    duration: Optional[int] = None

    @classmethod
    def from_pair(cls, progress: LearningProgress, content: LearningContent) -> "BookmarkedItem":
        base = ProgressResponse.from_model(progress).model_dump()
        return cls(
            **base,
            title=content.title,
            titleHindi=content.title_hindi,
            thumbnailPath=content.thumbnail_path,
            duration=content.duration,
        )


class MyLearningResponse(BaseModel):
    progress: list[ProgressResponse]
    bookmarked: list[BookmarkedItem]
