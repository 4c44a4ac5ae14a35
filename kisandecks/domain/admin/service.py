"""Admin service - Expert management for administrators"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import DuplicateError, NotFound, ValidationError
from ...models import Expert
from ...security_utils import hash_password
from .repository import ExpertRepository
from .schemas import EXPERT_PASSWORD_MIN_LENGTH, EXPERT_STATUSES, ExpertCreate

logger = logging.getLogger(__name__)

USERNAME_TAKEN = ("Username already exists", "यह यूज़रनेम पहले से मौजूद है")


class AdminService:
    """Service layer for admin-only expert management"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ExpertRepository()

    def _get(self, expert_id: int) -> Expert:
        expert = self.repo.get_by_id(self.db, expert_id)
        if not expert:
            raise NotFound("Expert not found", "विशेषज्ञ नहीं मिला")
        return expert

    def list_experts(self) -> list[Expert]:
        return self.repo.get_all(self.db)

    def create_expert(self, data: ExpertCreate) -> Expert:
        username = data.username.strip()
        if self.repo.get_by_username(self.db, username):
            raise DuplicateError(*USERNAME_TAKEN)

        try:
            expert = self.repo.create(
                self.db,
                username=username,
                password=hash_password(data.password),
                name=data.name.strip(),
                phone=data.phone.strip(),
                category=data.category,
                status=data.status or "pending",
                is_active=data.isActive,
            )
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError(*USERNAME_TAKEN) from e

        logger.info(f"👤 Expert {expert.id} ({expert.username}) created")
        return expert

    def update_status(self, expert_id: int, status: Optional[str]) -> Expert:
        if status not in EXPERT_STATUSES:
            raise ValidationError("Invalid status", "गलत स्थिति")
        expert = self._get(expert_id)
        logger.info(f"👤 Expert {expert_id} status -> {status}")
        return self.repo.update(self.db, expert, status=status)

    def set_active(self, expert_id: int, is_active: bool) -> Expert:
        expert = self._get(expert_id)
        logger.info(f"👤 Expert {expert_id} {'activated' if is_active else 'deactivated'}")
        return self.repo.update(self.db, expert, is_active=is_active)

    def set_password(self, expert_id: int, password: Optional[str]) -> None:
        if not password or len(password) < EXPERT_PASSWORD_MIN_LENGTH:
            raise ValidationError(
                "Password must be at least 4 characters", "पासवर्ड कम से कम 4 अक्षर का होना चाहिए"
            )
        expert = self._get(expert_id)
        self.repo.update(self.db, expert, password=hash_password(password))
        logger.info(f"🔐 Password reset for expert {expert_id}")

    def delete_expert(self, expert_id: int) -> None:
        expert = self._get(expert_id)
        self.repo.delete(self.db, expert)
        logger.info(f"🗑️ Expert {expert_id} deleted")
