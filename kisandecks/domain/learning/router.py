"""Learning router - content library, media delivery, shares, workshops and progress"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import Gone, NotFound
from ...sessions import CurrentSession, get_current_session, get_ledger_owner, require_admin
from .schemas import (
    BookmarkedItem,
    BookmarkRequest,
    BookmarkResponse,
    LearningContentCreate,
    LearningContentResponse,
    MyLearningResponse,
    ProgressResponse,
    ProgressUpdate,
    ProgressUpdateResponse,
    RegistrationResponse,
    ShareCreate,
    ShareCreatedResponse,
    ShareLookupResponse,
    WorkshopCreate,
    WorkshopRegisterRequest,
    WorkshopRegisterResponse,
    WorkshopResponse,
)
from .service import LearningService, iter_file_range

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/learning", tags=["Learning"])


def get_learning_service(db: Session = Depends(get_db)) -> LearningService:
    """Dependency injection for LearningService"""
    return LearningService(db)


# ============================================================================
# CONTENT
# ============================================================================


@router.get("/content", response_model=list[LearningContentResponse])
async def list_content(
    type: Optional[str] = None,
    category: Optional[str] = None,
    q: Optional[str] = None,
    service: LearningService = Depends(get_learning_service),
):
    return [LearningContentResponse.from_model(c) for c in service.list_content(type, category, q)]


@router.get("/content/{content_id}", response_model=LearningContentResponse)
async def get_content(content_id: int, service: LearningService = Depends(get_learning_service)):
    return LearningContentResponse.from_model(service.view_content(content_id))


@router.post("/content", response_model=LearningContentResponse, status_code=201)
async def create_content(
    data: LearningContentCreate,
    admin_id: int = Depends(require_admin),
    service: LearningService = Depends(get_learning_service),
):
    return LearningContentResponse.from_model(service.create_content(data, admin_id))


# ============================================================================
# MEDIA DELIVERY
# ============================================================================


@router.get("/stream/{content_type}/{content_id}")
async def stream_media(
    content_type: str,
    content_id: int,
    request: Request,
    service: LearningService = Depends(get_learning_service),
):
    """Stream a video or audio file, honouring a single byte Range"""
    media = service.open_stream(content_type, content_id, request.headers.get("range"))
    return StreamingResponse(
        iter_file_range(media.path, media.start, media.end),
        status_code=206 if media.partial else 200,
        media_type=media.media_type,
        headers=media.headers(),
    )


@router.get("/download/{content_id}")
async def download_content(content_id: int, service: LearningService = Depends(get_learning_service)):
    path, filename = service.prepare_download(content_id)
    return FileResponse(path, filename=filename)


@router.get("/thumbnail/{content_id}")
async def get_thumbnail(content_id: int, service: LearningService = Depends(get_learning_service)):
    return FileResponse(service.thumbnail_path(content_id))


# ============================================================================
# SHARES
# ============================================================================


@router.post("/share", response_model=ShareCreatedResponse)
async def create_share(
    data: ShareCreate,
    session: CurrentSession = Depends(get_current_session),
    service: LearningService = Depends(get_learning_service),
):
    share = service.create_share(data.contentId, data.contentType, session.account_id("farmer"))
    return ShareCreatedResponse.from_model(share)


@router.get("/share/{token}", response_model=ShareLookupResponse)
async def resolve_share(token: str, service: LearningService = Depends(get_learning_service)):
    """Public share link check; failures keep the {valid: false} shape"""
    try:
        share = service.resolve_share(token)
    except (NotFound, Gone) as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"valid": False, **e.to_dict()},
        )
    return ShareLookupResponse(contentId=share.content_id, contentType=share.content_type)


# ============================================================================
# WORKSHOPS
# ============================================================================


@router.get("/workshops", response_model=list[WorkshopResponse])
async def list_workshops(service: LearningService = Depends(get_learning_service)):
    return [WorkshopResponse.from_model(w) for w in service.list_workshops()]


@router.post("/workshops", response_model=WorkshopResponse, status_code=201)
async def create_workshop(
    data: WorkshopCreate,
    _admin_id: int = Depends(require_admin),
    service: LearningService = Depends(get_learning_service),
):
    return WorkshopResponse.from_model(service.create_workshop(data))


@router.post("/workshops/{workshop_id}/register", response_model=WorkshopRegisterResponse)
async def register_for_workshop(
    workshop_id: int,
    data: WorkshopRegisterRequest,
    owner: str = Depends(get_ledger_owner),
    service: LearningService = Depends(get_learning_service),
):
    registration = service.register_for_workshop(workshop_id, owner, data.farmerName, data.farmerPhone)
    return WorkshopRegisterResponse(registration=RegistrationResponse.from_model(registration))


# ============================================================================
# PROGRESS
# ============================================================================


@router.post("/bookmark", response_model=BookmarkResponse)
async def toggle_bookmark(
    data: BookmarkRequest,
    owner: str = Depends(get_ledger_owner),
    service: LearningService = Depends(get_learning_service),
):
    progress = service.toggle_bookmark(owner, data.contentId, data.contentType)
    return BookmarkResponse(isBookmarked=bool(progress.is_bookmarked))


@router.post("/progress", response_model=ProgressUpdateResponse)
async def update_progress(
    data: ProgressUpdate,
    owner: str = Depends(get_ledger_owner),
    service: LearningService = Depends(get_learning_service),
):
    progress = service.record_progress(
        owner,
        data.contentId,
        data.contentType,
        watched_seconds=data.watchedSeconds,
        total_seconds=data.totalSeconds,
        completed_percent=data.completedPercent,
        is_completed=data.isCompleted,
    )
    return ProgressUpdateResponse(progress=ProgressResponse.from_model(progress))


@router.get("/my-learning", response_model=MyLearningResponse)
async def my_learning(
    owner: str = Depends(get_ledger_owner),
    service: LearningService = Depends(get_learning_service),
):
    progress, bookmarked = service.my_learning(owner)
    return MyLearningResponse(
        progress=[ProgressResponse.from_model(p) for p in progress],
        bookmarked=[BookmarkedItem.from_pair(p, c) for p, c in bookmarked],
    )
