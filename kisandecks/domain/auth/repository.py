"""Auth repository - Database operations for admin, expert and farmer accounts"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Admin, Expert, Farmer, utcnow


class AccountRepository:
    """Repository for account database operations"""

    @staticmethod
    def get_admin_by_username(db: Session, username: str) -> Optional[Admin]:
        return db.query(Admin).filter(Admin.username == username).first()

    @staticmethod
    def get_admin_by_id(db: Session, admin_id: int) -> Optional[Admin]:
        return db.query(Admin).filter(Admin.id == admin_id).first()

    @staticmethod
    def get_expert_by_username(db: Session, username: str) -> Optional[Expert]:
        return db.query(Expert).filter(Expert.username == username).first()

    @staticmethod
    def get_expert_by_id(db: Session, expert_id: int) -> Optional[Expert]:
        return db.query(Expert).filter(Expert.id == expert_id).first()

    @staticmethod
    def get_farmer_by_phone(db: Session, phone: str) -> Optional[Farmer]:
        return db.query(Farmer).filter(Farmer.phone == phone).first()

    @staticmethod
    def get_farmer_by_id(db: Session, farmer_id: int) -> Optional[Farmer]:
        return db.query(Farmer).filter(Farmer.id == farmer_id).first()

    @staticmethod
    def create_farmer(db: Session, **farmer_data) -> Farmer:
        """Create a new farmer"""
        farmer = Farmer(**farmer_data)
        db.add(farmer)
        db.commit()
        db.refresh(farmer)
        return farmer

    @staticmethod
    def update_farmer(db: Session, farmer: Farmer, **updates) -> Farmer:
        """Update a farmer with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(farmer, key):
                setattr(farmer, key, value)

        db.commit()
        db.refresh(farmer)
        return farmer

    @staticmethod
    def touch_last_login(db: Session, farmer: Farmer) -> None:
        farmer.last_login_at = utcnow()
        db.commit()

    @staticmethod
    def update_password(db: Session, account, password_hash: str) -> None:
        """Persist a new password hash on any account model"""
        account.password = password_hash
        db.commit()

    @staticmethod
    def delete_farmer(db: Session, farmer: Farmer) -> None:
        db.delete(farmer)
        db.commit()
