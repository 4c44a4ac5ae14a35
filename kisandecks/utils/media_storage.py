"""
Local media storage for uploads (profile photos, advisory images, learning media).
Handles validation, unique naming and path resolution under MEDIA_ROOT.
"""

import logging
import mimetypes
import secrets
import time
from pathlib import Path
from typing import Optional, Tuple

from fastapi import UploadFile

from ..config import MAX_IMAGE_UPLOAD_BYTES, MAX_MEDIA_UPLOAD_BYTES, MEDIA_ROOT, UPLOAD_DIR

logger = logging.getLogger(__name__)

ALLOWED_VIDEO_MIME_TYPES = ["video/mp4", "video/webm", "video/quicktime"]
ALLOWED_AUDIO_MIME_TYPES = ["audio/mpeg", "audio/mp3", "audio/wav", "audio/ogg"]
ALLOWED_IMAGE_MIME_TYPES = ["image/jpeg", "image/png", "image/webp"]

CHUNK_SIZE = 1024 * 1024  # 1MB

MEDIA_FOLDERS = {"video": "videos", "audio": "audio", "image": "thumbnails"}


def validate_media_file(
    filename: Optional[str], size_bytes: int, mime_type: Optional[str], kind: str
) -> Tuple[bool, Optional[str]]:
    """
    Validate an uploaded file before it is stored.

    Args:
        filename: Original filename
        size_bytes: File size in bytes
        mime_type: MIME type reported by the client
        kind: "video", "audio" or "image"

    Returns:
        Tuple of (is_valid, error_message)
    """
    allowed = {
        "video": ALLOWED_VIDEO_MIME_TYPES,
        "audio": ALLOWED_AUDIO_MIME_TYPES,
        "image": ALLOWED_IMAGE_MIME_TYPES,
    }[kind]
    limit = MAX_IMAGE_UPLOAD_BYTES if kind == "image" else MAX_MEDIA_UPLOAD_BYTES

    if not filename:
        return False, "File name is required"
    if mime_type not in allowed:
        return False, f"Unsupported {kind} type. Allowed: {', '.join(allowed)}"
    if size_bytes <= 0:
        return False, "File is empty"
    if size_bytes > limit:
        return False, f"File too large. Maximum size is {limit // (1024 * 1024)}MB"
    return True, None


def _unique_name(original: str, mime_type: Optional[str]) -> str:
    ext = Path(original).suffix.lower()
    if not ext and mime_type:
        ext = mimetypes.guess_extension(mime_type) or ""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}{ext}"


async def save_upload(upload: UploadFile, kind: str, subfolder: Optional[str] = None) -> Tuple[str, int]:
    """
    Stream an upload to UPLOAD_DIR/<folder>/ and return (path relative to MEDIA_ROOT, size).

    Raises:
        ValueError: If the file fails validation
    """
    folder = UPLOAD_DIR / (subfolder or MEDIA_FOLDERS[kind])
    folder.mkdir(parents=True, exist_ok=True)
    target = folder / _unique_name(upload.filename or "", upload.content_type)
    limit = MAX_IMAGE_UPLOAD_BYTES if kind == "image" else MAX_MEDIA_UPLOAD_BYTES

    size = 0
    with target.open("wb") as out:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > limit:
                break
            out.write(chunk)

    is_valid, error = validate_media_file(upload.filename, size, upload.content_type, kind)
    if not is_valid:
        target.unlink(missing_ok=True)
        raise ValueError(error)

    logger.info(f"📁 Stored {kind} upload {target.name} ({size} bytes)")
    return media_relative_path(target), size


def media_relative_path(path: Path) -> str:
    """Path as stored in the database: relative to MEDIA_ROOT with a leading slash"""
    return "/" + path.resolve().relative_to(MEDIA_ROOT.resolve()).as_posix()


def upload_url(relative_path: str) -> str:
    """Public URL for a stored upload (served under /uploads)"""
    uploads_prefix = "/" + UPLOAD_DIR.resolve().relative_to(MEDIA_ROOT.resolve()).as_posix()
    return "/uploads" + relative_path[len(uploads_prefix):]


def resolve_media_path(relative_path: Optional[str]) -> Optional[Path]:
    """Absolute path for a stored media path, or None if it escapes MEDIA_ROOT or is missing"""
    if not relative_path:
        return None
    root = MEDIA_ROOT.resolve()
    candidate = (root / relative_path.lstrip("/")).resolve()
    if root not in candidate.parents and candidate != root:
        logger.warning(f"⚠️ Refusing media path outside MEDIA_ROOT: {relative_path}")
        return None
    if not candidate.is_file():
        return None
    return candidate
