"""Learning service - Business logic for the learning library"""

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta, timezone
from pathlib import Path
from typing import Iterator, Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from ...errors import DuplicateError, Forbidden, Gone, NotFound, RangeNotSatisfiable, ValidationError
from ...models import ContentShare, LearningContent, LearningProgress, Workshop, WorkshopRegistration, utcnow
from ...utils.media_storage import CHUNK_SIZE, resolve_media_path, save_upload
from ...utils.sanitization import clean_optional, safe_filename_stem
from .repository import LearningRepository
from .schemas import CONTENT_TYPES, LearningContentCreate, WorkshopCreate

logger = logging.getLogger(__name__)

SHARE_TTL = timedelta(days=7)
SHARE_TOKEN_BYTES = 32

DEFAULT_MIME_TYPES = {"video": "video/mp4", "audio": "audio/mpeg"}
UPLOAD_DEFAULT_TITLES = {"video": "Untitled Video", "audio": "Untitled Audio"}
UPLOAD_DEFAULT_CATEGORY = "crop-management"


@dataclass
class MediaSlice:
    """A byte window of a stored media file, ready to stream"""

    path: Path
    start: int
    end: int  # inclusive
    file_size: int
    media_type: str
    partial: bool

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def headers(self) -> dict:
        headers = {"Content-Length": str(self.length), "Accept-Ranges": "bytes"}
        if self.partial:
            headers["Content-Range"] = f"bytes {self.start}-{self.end}/{self.file_size}"
        return headers


def parse_range_header(range_header: Optional[str], file_size: int) -> Optional[tuple[int, int]]:
    """
    Parse a single "bytes=start-end" range against a file of file_size bytes.

    Returns:
        (start, end) inclusive, or None when there is no usable Range header

    Raises:
        RangeNotSatisfiable: If the range starts past the end of the file
    """
    if not range_header or not range_header.startswith("bytes="):
        return None
    byte_range = range_header[len("bytes="):].split(",")[0].strip()
    start_text, _, end_text = byte_range.partition("-")

    try:
        if not start_text:
            # Suffix form: last N bytes
            suffix = int(end_text)
            if suffix <= 0:
                raise RangeNotSatisfiable(file_size)
            return max(file_size - suffix, 0), file_size - 1
        start = int(start_text)
        end = int(end_text) if end_text else file_size - 1
    except ValueError:
        logger.debug(f"Ignoring malformed Range header: {range_header}")
        return None

    if start >= file_size or start > end:
        raise RangeNotSatisfiable(file_size)
    return start, min(end, file_size - 1)


def iter_file_range(path: Path, start: int, end: int, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the inclusive byte window [start, end] of a file in chunks"""
    remaining = end - start + 1
    with path.open("rb") as fh:
        fh.seek(start)
        while remaining > 0:
            chunk = fh.read(min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk


def _int_or_zero(value) -> int:
    # bool is an int subclass but never a valid counter
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def _require_content_ref(content_id, content_type) -> None:
    if isinstance(content_id, bool) or not isinstance(content_id, int) or not content_id:
        raise ValidationError("Valid content ID is required", "सही कंटेंट ID आवश्यक है")
    if content_type not in CONTENT_TYPES:
        raise ValidationError("Content type must be 'video' or 'audio'", "कंटेंट प्रकार 'video' या 'audio' होना चाहिए")


class LearningService:
    """Service layer for learning content, workshops and farmer progress"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = LearningRepository()

    # ========================================================================
    # CONTENT
    # ========================================================================

    def list_content(
        self, content_type: Optional[str] = None, category: Optional[str] = None, query: Optional[str] = None
    ) -> list[LearningContent]:
        items = self.repo.list_content(self.db, content_type, category)
        if not query:
            return items

        needle = query.lower()
        return [
            item
            for item in items
            if needle in item.title.lower()
            or needle in (item.title_hindi or "").lower()
            or needle in (item.tags or "").lower()
        ]

    def _get_content(self, content_id: int) -> LearningContent:
        content = self.repo.get_content(self.db, content_id)
        if not content:
            raise NotFound("Content not found", "कंटेंट नहीं मिला")
        return content

    def view_content(self, content_id: int) -> LearningContent:
        content = self._get_content(content_id)
        self.repo.increment_counter(self.db, content, "view_count")
        return content

    def create_content(self, data: LearningContentCreate, admin_id: Optional[int] = None) -> LearningContent:
        content = self.repo.create_content(
            self.db,
            type=data.type,
            title=data.title.strip(),
            title_hindi=data.titleHindi,
            category=data.category,
            description=data.description,
            description_hindi=data.descriptionHindi,
            duration=data.duration,
            language=data.language or "hindi",
            thumbnail_path=data.thumbnailPath,
            file_path=data.filePath,
            file_size=data.fileSize,
            mime_type=data.mimeType,
            transcript=data.transcript,
            tags=data.tags,
            is_downloadable=data.isDownloadable,
            uploaded_by_admin_id=admin_id,
        )
        logger.info(f"🎬 Learning content {content.id} created ({content.type}: {content.title})")
        return content

    async def upload_content(
        self,
        content_type: str,
        media: Optional[UploadFile],
        thumbnail: Optional[UploadFile],
        fields: dict,
        admin_id: int,
    ) -> LearningContent:
        """Store an uploaded media file (and optional thumbnail) and create its record"""
        if content_type not in CONTENT_TYPES:
            raise NotFound("Unknown content type", "गलत कंटेंट प्रकार")
        if media is None or not media.filename:
            label = content_type.capitalize()
            raise ValidationError(f"{label} file is required", "मीडिया फाइल आवश्यक है")

        stored: list[str] = []
        try:
            file_path, file_size = await save_upload(media, content_type)
            stored.append(file_path)
            thumbnail_path = None
            if thumbnail is not None and thumbnail.filename:
                thumbnail_path, _ = await save_upload(thumbnail, "image")
                stored.append(thumbnail_path)
        except ValueError as e:
            self._discard(stored)
            raise ValidationError(str(e), "फाइल मान्य नहीं है") from e

        duration = fields.get("duration")
        content = self.repo.create_content(
            self.db,
            type=content_type,
            title=clean_optional(fields.get("title"), 200) or UPLOAD_DEFAULT_TITLES[content_type],
            title_hindi=clean_optional(fields.get("titleHindi"), 200),
            category=clean_optional(fields.get("category"), 50) or UPLOAD_DEFAULT_CATEGORY,
            description=clean_optional(fields.get("description"), 5000),
            description_hindi=clean_optional(fields.get("descriptionHindi"), 5000),
            duration=int(duration) if duration and str(duration).isdigit() else None,
            language=clean_optional(fields.get("language"), 20) or "hindi",
            file_path=file_path,
            thumbnail_path=thumbnail_path,
            file_size=file_size,
            mime_type=media.content_type,
            tags=clean_optional(fields.get("tags"), 500),
            is_downloadable=True,
            uploaded_by_admin_id=admin_id,
        )
        logger.info(f"📤 Admin {admin_id} uploaded {content_type} {content.id} ({file_size} bytes)")
        return content

    @staticmethod
    def _discard(relative_paths: list[str]) -> None:
        for relative_path in relative_paths:
            path = resolve_media_path(relative_path)
            if path:
                path.unlink(missing_ok=True)

    # ========================================================================
    # MEDIA DELIVERY
    # ========================================================================

    def open_stream(self, content_type: str, content_id: int, range_header: Optional[str]) -> MediaSlice:
        """Resolve a stream request to a byte window and count the view"""
        label = content_type.capitalize()
        content = self.repo.get_content(self.db, content_id)
        if not content or content.type != content_type:
            raise NotFound(f"{label} not found", "कंटेंट नहीं मिला")

        path = resolve_media_path(content.file_path)
        if path is None:
            raise NotFound(f"{label} file not found", "फाइल नहीं मिली")

        file_size = path.stat().st_size
        window = parse_range_header(range_header, file_size) if file_size else None
        start, end = window if window else (0, file_size - 1)

        self.repo.increment_counter(self.db, content, "view_count")
        return MediaSlice(
            path=path,
            start=start,
            end=end,
            file_size=file_size,
            media_type=content.mime_type or DEFAULT_MIME_TYPES[content_type],
            partial=window is not None,
        )

    def prepare_download(self, content_id: int) -> tuple[Path, str]:
        """Return (file path, attachment filename) and count the download"""
        content = self._get_content(content_id)
        if not content.is_downloadable:
            raise Forbidden("Content is not downloadable", "यह कंटेंट डाउनलोड नहीं किया जा सकता")

        path = resolve_media_path(content.file_path)
        if path is None:
            raise NotFound("File not found", "फाइल नहीं मिली")

        self.repo.increment_counter(self.db, content, "download_count")
        filename = f"{safe_filename_stem(content.title)}_{content.id}{Path(content.file_path).suffix}"
        return path, filename

    def thumbnail_path(self, content_id: int) -> Path:
        content = self.repo.get_content(self.db, content_id)
        if not content or not content.thumbnail_path:
            raise NotFound("Thumbnail not found", "थंबनेल नहीं मिला")
        path = resolve_media_path(content.thumbnail_path)
        if path is None:
            raise NotFound("Thumbnail file not found", "थंबनेल फाइल नहीं मिली")
        return path

    # ========================================================================
    # SHARES
    # ========================================================================

    def create_share(self, content_id, content_type, farmer_id: Optional[int]) -> ContentShare:
        if not content_id or not content_type:
            raise ValidationError("Content ID and type required", "कंटेंट ID और प्रकार आवश्यक है")

        share = self.repo.create_share(
            self.db,
            content_id=content_id,
            content_type=content_type,
            share_token=secrets.token_hex(SHARE_TOKEN_BYTES),
            shared_by_farmer_id=farmer_id,
            expires_at=utcnow() + SHARE_TTL,
        )
        logger.info(f"🔗 Share link created for {content_type} {content_id}")
        return share

    def resolve_share(self, token: str) -> ContentShare:
        share = self.repo.get_share_by_token(self.db, token)
        if not share:
            raise NotFound("Share link not found", "शेयर लिंक नहीं मिला")
        if share.expires_at and share.expires_at < utcnow():
            raise Gone("Share link expired", "शेयर लिंक की समय सीमा समाप्त हो गई")

        self.repo.increment_share_access(self.db, share)
        return share

    # ========================================================================
    # WORKSHOPS
    # ========================================================================

    def list_workshops(self) -> list[Workshop]:
        return self.repo.list_workshops(self.db)

    def create_workshop(self, data: WorkshopCreate) -> Workshop:
        scheduled_at = data.scheduledAt
        if scheduled_at.tzinfo is not None:
            scheduled_at = scheduled_at.astimezone(timezone.utc).replace(tzinfo=None)

        workshop = self.repo.create_workshop(
            self.db,
            title=data.title.strip(),
            title_hindi=data.titleHindi,
            description=data.description,
            description_hindi=data.descriptionHindi,
            category=data.category,
            trainer_name=data.trainerName.strip(),
            trainer_name_hindi=data.trainerNameHindi,
            scheduled_at=scheduled_at,
            duration_minutes=data.durationMinutes,
            language=data.language or "hindi",
            max_seats=data.maxSeats,
            join_link=data.joinLink,
            join_method=data.joinMethod or "youtube",
            thumbnail_url=data.thumbnailUrl,
            recording_url=data.recordingUrl,
            status=data.status or "upcoming",
        )
        logger.info(f"📺 Workshop {workshop.id} scheduled for {workshop.scheduled_at.isoformat()}")
        return workshop

    def register_for_workshop(
        self, workshop_id: int, farmer_id: str, farmer_name, farmer_phone: Optional[str]
    ) -> WorkshopRegistration:
        if not farmer_name or not isinstance(farmer_name, str) or not farmer_name.strip():
            raise ValidationError("Farmer name is required", "किसान का नाम आवश्यक है")

        if not self.repo.get_workshop(self.db, workshop_id):
            raise NotFound("Workshop not found", "वर्कशॉप नहीं मिली")
        if self.repo.is_registered(self.db, workshop_id, farmer_id):
            raise DuplicateError("Already registered for this workshop", "आप इस वर्कशॉप के लिए पहले से पंजीकृत हैं")

        registration = self.repo.register(
            self.db,
            workshop_id=workshop_id,
            farmer_id=farmer_id,
            farmer_name=clean_optional(farmer_name, 100),
            farmer_phone=clean_optional(farmer_phone, 20),
        )
        logger.info(f"📝 Farmer {farmer_id} registered for workshop {workshop_id}")
        return registration

    # ========================================================================
    # PROGRESS
    # ========================================================================

    def toggle_bookmark(self, farmer_id: str, content_id, content_type) -> LearningProgress:
        _require_content_ref(content_id, content_type)
        existing = self.repo.get_progress(self.db, farmer_id, content_id, content_type)
        if existing is None:
            return self.repo.save_progress(
                self.db,
                None,
                farmer_id=farmer_id,
                content_id=content_id,
                content_type=content_type,
                is_bookmarked=True,
            )
        return self.repo.save_progress(self.db, existing, is_bookmarked=not existing.is_bookmarked)

    def record_progress(
        self,
        farmer_id: str,
        content_id,
        content_type,
        watched_seconds=None,
        total_seconds=None,
        completed_percent=None,
        is_completed=None,
    ) -> LearningProgress:
        _require_content_ref(content_id, content_type)
        values = {
            "watched_seconds": _int_or_zero(watched_seconds),
            "total_seconds": _int_or_zero(total_seconds),
            "completed_percent": _int_or_zero(completed_percent),
            "is_completed": is_completed if isinstance(is_completed, bool) else False,
        }
        existing = self.repo.get_progress(self.db, farmer_id, content_id, content_type)
        if existing is None:
            values.update(farmer_id=farmer_id, content_id=content_id, content_type=content_type)
        return self.repo.save_progress(self.db, existing, **values)

    def my_learning(self, farmer_id: str) -> tuple[list[LearningProgress], list[tuple]]:
        return self.repo.list_progress(self.db, farmer_id), self.repo.list_bookmarked(self.db, farmer_id)
