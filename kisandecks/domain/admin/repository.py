"""Admin repository - Expert account management"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Expert


class ExpertRepository:
    """Repository for expert database operations"""

    @staticmethod
    def get_all(db: Session) -> list[Expert]:
        return db.query(Expert).order_by(Expert.created_at.desc(), Expert.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, expert_id: int) -> Optional[Expert]:
        return db.query(Expert).filter(Expert.id == expert_id).first()

    @staticmethod
    def get_by_username(db: Session, username: str) -> Optional[Expert]:
        return db.query(Expert).filter(Expert.username == username).first()

    @staticmethod
    def create(db: Session, **expert_data) -> Expert:
        expert = Expert(**expert_data)
        db.add(expert)
        db.commit()
        db.refresh(expert)
        return expert

    @staticmethod
    def update(db: Session, expert: Expert, **updates) -> Expert:
        for key, value in updates.items():
            if hasattr(expert, key):
                setattr(expert, key, value)
        db.commit()
        db.refresh(expert)
        return expert

    @staticmethod
    def delete(db: Session, expert: Expert) -> None:
        db.delete(expert)
        db.commit()
