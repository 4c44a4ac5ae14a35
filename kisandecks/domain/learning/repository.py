"""Learning repository - Database operations for content, workshops, shares and progress"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import (
    ContentShare,
    LearningContent,
    LearningProgress,
    Workshop,
    WorkshopRegistration,
    utcnow,
)


class LearningRepository:
    """Repository for learning database operations"""

    # Content

    @staticmethod
    def list_content(db: Session, content_type: Optional[str] = None, category: Optional[str] = None) -> list:
        query = db.query(LearningContent).filter(LearningContent.is_active.is_(True))
        if content_type:
            query = query.filter(LearningContent.type == content_type)
        if category:
            query = query.filter(LearningContent.category == category)
        return query.order_by(LearningContent.created_at.desc(), LearningContent.id.desc()).all()

    @staticmethod
    def get_content(db: Session, content_id: int) -> Optional[LearningContent]:
        return db.query(LearningContent).filter(LearningContent.id == content_id).first()

    @staticmethod
    def create_content(db: Session, **content_data) -> LearningContent:
        content = LearningContent(**content_data)
        db.add(content)
        db.commit()
        db.refresh(content)
        return content

    @staticmethod
    def increment_counter(db: Session, content: LearningContent, column: str) -> None:
        """Atomic counter bump (view_count, download_count)"""
        db.query(LearningContent).filter(LearningContent.id == content.id).update(
            {column: getattr(LearningContent, column) + 1}, synchronize_session=False
        )
        db.commit()
        db.refresh(content)

    # Shares

    @staticmethod
    def create_share(db: Session, **share_data) -> ContentShare:
        share = ContentShare(**share_data)
        db.add(share)
        db.commit()
        db.refresh(share)
        return share

    @staticmethod
    def get_share_by_token(db: Session, token: str) -> Optional[ContentShare]:
        return db.query(ContentShare).filter(ContentShare.share_token == token).first()

    @staticmethod
    def increment_share_access(db: Session, share: ContentShare) -> None:
        db.query(ContentShare).filter(ContentShare.id == share.id).update(
            {"access_count": ContentShare.access_count + 1}, synchronize_session=False
        )
        db.commit()

    # Workshops

    @staticmethod
    def list_workshops(db: Session) -> list[Workshop]:
        return (
            db.query(Workshop)
            .filter(Workshop.is_active.is_(True))
            .order_by(Workshop.scheduled_at.desc())
            .all()
        )

    @staticmethod
    def get_workshop(db: Session, workshop_id: int) -> Optional[Workshop]:
        return db.query(Workshop).filter(Workshop.id == workshop_id).first()

    @staticmethod
    def create_workshop(db: Session, **workshop_data) -> Workshop:
        workshop = Workshop(**workshop_data)
        db.add(workshop)
        db.commit()
        db.refresh(workshop)
        return workshop

    @staticmethod
    def is_registered(db: Session, workshop_id: int, farmer_id: str) -> bool:
        return (
            db.query(WorkshopRegistration)
            .filter(
                WorkshopRegistration.workshop_id == workshop_id,
                WorkshopRegistration.farmer_id == farmer_id,
            )
            .first()
            is not None
        )

    @staticmethod
    def register(db: Session, **registration_data) -> WorkshopRegistration:
        """Insert the registration and bump registered_count in one commit"""
        registration = WorkshopRegistration(**registration_data)
        db.add(registration)
        db.query(Workshop).filter(Workshop.id == registration.workshop_id).update(
            {"registered_count": Workshop.registered_count + 1}, synchronize_session=False
        )
        db.commit()
        db.refresh(registration)
        return registration

    # Progress

    @staticmethod
    def get_progress(db: Session, farmer_id: str, content_id: int, content_type: str) -> Optional[LearningProgress]:
        return (
            db.query(LearningProgress)
            .filter(
                LearningProgress.farmer_id == farmer_id,
                LearningProgress.content_id == content_id,
                LearningProgress.content_type == content_type,
            )
            .first()
        )

    @staticmethod
    def list_progress(db: Session, farmer_id: str) -> list[LearningProgress]:
        return (
            db.query(LearningProgress)
            .filter(LearningProgress.farmer_id == farmer_id)
            .order_by(LearningProgress.last_watched_at.desc(), LearningProgress.id.desc())
            .all()
        )

    @staticmethod
    def list_bookmarked(db: Session, farmer_id: str) -> list[tuple[LearningProgress, LearningContent]]:
        return (
            db.query(LearningProgress, LearningContent)
            .join(LearningContent, LearningContent.id == LearningProgress.content_id)
            .filter(LearningProgress.farmer_id == farmer_id, LearningProgress.is_bookmarked.is_(True))
            .order_by(LearningProgress.last_watched_at.desc(), LearningProgress.id.desc())
            .all()
        )

    @staticmethod
    def save_progress(db: Session, progress: Optional[LearningProgress], **values) -> LearningProgress:
        """Update an existing row (touching last_watched_at) or insert a new one"""
        if progress is None:
            progress = LearningProgress(**values)
            db.add(progress)
        else:
            for key, value in values.items():
                setattr(progress, key, value)
            progress.last_watched_at = utcnow()
        db.commit()
        db.refresh(progress)
        return progress
