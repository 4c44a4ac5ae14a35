"""Account repository - Database operations for the farmer's ledger"""

from datetime import datetime
from typing import Optional, Type, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import CropTracking, Expense, Income

LedgerModel = Type[Union[Expense, Income]]


class LedgerRepository:
    """Repository for expense, income and crop tracking rows, always scoped to an owner"""

    @staticmethod
    def create(db: Session, model, **data):
        row = model(**data)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    @staticmethod
    def list_entries(
        db: Session,
        model: LedgerModel,
        owner: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list:
        query = db.query(model).filter(model.farmer_id == owner)
        if start:
            query = query.filter(model.date >= start)
        if end:
            query = query.filter(model.date <= end)
        return query.order_by(model.date.desc(), model.id.desc()).all()

    @staticmethod
    def totals_by_category(
        db: Session, model: LedgerModel, owner: str, start: Optional[datetime] = None
    ) -> list[tuple[str, int]]:
        total = func.sum(model.amount).label("total")
        query = db.query(model.category, total).filter(model.farmer_id == owner)
        if start:
            query = query.filter(model.date >= start)
        return query.group_by(model.category).order_by(total.desc(), model.category).all()

    @staticmethod
    def get_owned(db: Session, model, row_id: int, owner: str):
        return db.query(model).filter(model.id == row_id, model.farmer_id == owner).first()

    @staticmethod
    def delete(db: Session, row) -> None:
        db.delete(row)
        db.commit()

    @staticmethod
    def list_crops(db: Session, owner: str) -> list[CropTracking]:
        return (
            db.query(CropTracking)
            .filter(CropTracking.farmer_id == owner)
            .order_by(CropTracking.created_at.desc(), CropTracking.id.desc())
            .all()
        )
