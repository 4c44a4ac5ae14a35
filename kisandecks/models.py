from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

DEFAULT_LEDGER_OWNER = "default"


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the database stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    # bcrypt hash, or plaintext for accounts created before hashing was introduced
    password = Column(Text, nullable=False)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Expert(Base):
    __tablename__ = "experts"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(Text, nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    category = Column(String(50), nullable=False)  # crop, soil, water, fruit-veg, cattle
    status = Column(String(20), default="pending", nullable=False)  # pending, approved, rejected
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    bookings = relationship("Booking", back_populates="expert")


class Farmer(Base):
    __tablename__ = "farmers"

    id = Column(Integer, primary_key=True, index=True)
    phone = Column(String(15), unique=True, index=True, nullable=False)
    password = Column(Text, nullable=False)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    village = Column(String(255), nullable=True)
    district = Column(String(255), nullable=True)
    state = Column(String(255), nullable=True)
    language = Column(String(20), default="hindi", nullable=False)  # hindi, english, marathi
    crops = Column(Text, nullable=True)  # comma separated
    profile_photo = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    last_login_at = Column(DateTime, nullable=True)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(20), unique=True, index=True, nullable=False)
    name = Column(Text, nullable=False)
    phone = Column(String(20), nullable=False)
    category = Column(String(50), nullable=False)
    mode = Column(String(20), nullable=False)  # call, chat, video
    payment_status = Column(String(20), default="PENDING", nullable=False)  # PENDING, PAID, FAILED
    session_status = Column(
        String(20), default="pending", nullable=False
    )  # pending, assigned, in-progress, completed
    expert_id = Column(Integer, ForeignKey("experts.id", ondelete="SET NULL"), nullable=True, index=True)
    assigned_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    timestamp = Column(DateTime, default=utcnow, nullable=False)

    expert = relationship("Expert", back_populates="bookings")


class AdvisoryChat(Base):
    __tablename__ = "advisory_chats"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(50), index=True, nullable=False)
    role = Column(String(20), nullable=False)  # user, assistant
    content = Column(Text, nullable=False)
    category = Column(String(50), nullable=True)
    advisory_type = Column(String(20), default="general", nullable=True)
    image_url = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=utcnow, nullable=False)


class MarketPrice(Base):
    __tablename__ = "market_prices"

    id = Column(Integer, primary_key=True, index=True)
    state = Column(String(100), index=True, nullable=False)
    district = Column(String(100), nullable=True)
    market = Column(String(100), nullable=False)
    commodity = Column(String(100), index=True, nullable=False)
    variety = Column(String(100), nullable=True)
    min_price = Column(Integer, nullable=True)
    max_price = Column(Integer, nullable=True)
    modal_price = Column(Integer, nullable=True)
    price_date = Column(String(20), nullable=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    farmer_id = Column(String(100), default=DEFAULT_LEDGER_OWNER, index=True, nullable=False)
    category = Column(String(50), nullable=False)
    amount = Column(Integer, nullable=False)
    crop = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    photo_url = Column(Text, nullable=True)
    date = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Income(Base):
    __tablename__ = "incomes"

    id = Column(Integer, primary_key=True, index=True)
    farmer_id = Column(String(100), default=DEFAULT_LEDGER_OWNER, index=True, nullable=False)
    category = Column(String(50), nullable=False)
    amount = Column(Integer, nullable=False)
    crop = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=True)
    unit = Column(String(20), nullable=True)
    date = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class CropTracking(Base):
    __tablename__ = "crop_tracking"

    id = Column(Integer, primary_key=True, index=True)
    farmer_id = Column(String(100), default=DEFAULT_LEDGER_OWNER, index=True, nullable=False)
    crop_name = Column(String(100), nullable=False)
    land_area = Column(Float, nullable=True)  # in bigha or acres
    area_unit = Column(String(20), default="acre")
    expected_yield = Column(Float, nullable=True)  # in kg or quintal
    yield_unit = Column(String(20), default="quintal")
    sowing_date = Column(DateTime, nullable=True)
    harvest_date = Column(DateTime, nullable=True)
    status = Column(String(20), default="active")  # active, harvested, sold
    created_at = Column(DateTime, default=utcnow, nullable=False)


class LearningContent(Base):
    __tablename__ = "learning_content"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(20), nullable=False)  # video, audio
    title = Column(String(200), nullable=False)
    title_hindi = Column(String(200), nullable=True)
    category = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    description_hindi = Column(Text, nullable=True)
    duration = Column(Integer, nullable=True)  # seconds
    language = Column(String(20), default="hindi")
    thumbnail_path = Column(Text, nullable=True)  # relative to MEDIA_ROOT
    file_path = Column(Text, nullable=False)  # relative to MEDIA_ROOT
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(50), nullable=True)
    transcript = Column(Text, nullable=True)
    tags = Column(Text, nullable=True)  # comma separated
    is_downloadable = Column(Boolean, default=True, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)
    like_count = Column(Integer, default=0, nullable=False)
    download_count = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    uploaded_by_admin_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class Workshop(Base):
    __tablename__ = "workshops"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    title_hindi = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    description_hindi = Column(Text, nullable=True)
    category = Column(String(50), nullable=False)
    trainer_name = Column(String(100), nullable=False)
    trainer_name_hindi = Column(String(100), nullable=True)
    scheduled_at = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, default=60)
    language = Column(String(20), default="hindi")
    max_seats = Column(Integer, default=100)
    registered_count = Column(Integer, default=0, nullable=False)
    join_link = Column(Text, nullable=True)  # YouTube Live, Meet, Zoom link
    join_method = Column(String(20), default="youtube")  # youtube, meet, zoom
    thumbnail_url = Column(Text, nullable=True)
    recording_url = Column(Text, nullable=True)
    status = Column(String(20), default="upcoming")  # upcoming, live, completed, cancelled
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    registrations = relationship(
        "WorkshopRegistration", back_populates="workshop", cascade="all, delete-orphan"
    )


class WorkshopRegistration(Base):
    __tablename__ = "workshop_registrations"
    __table_args__ = (UniqueConstraint("workshop_id", "farmer_id", name="uq_workshop_farmer"),)

    id = Column(Integer, primary_key=True, index=True)
    workshop_id = Column(Integer, ForeignKey("workshops.id", ondelete="CASCADE"), nullable=False)
    farmer_id = Column(String(100), default=DEFAULT_LEDGER_OWNER, nullable=False)
    farmer_name = Column(String(100), nullable=True)
    farmer_phone = Column(String(20), nullable=True)
    attended = Column(Boolean, default=False)
    registered_at = Column(DateTime, default=utcnow, nullable=False)

    workshop = relationship("Workshop", back_populates="registrations")


class LearningProgress(Base):
    __tablename__ = "learning_progress"

    id = Column(Integer, primary_key=True, index=True)
    farmer_id = Column(String(100), default=DEFAULT_LEDGER_OWNER, index=True, nullable=False)
    content_id = Column(Integer, nullable=False)
    content_type = Column(String(20), nullable=False)  # video, audio
    watched_seconds = Column(Integer, default=0)
    total_seconds = Column(Integer, default=0)
    completed_percent = Column(Integer, default=0)
    is_completed = Column(Boolean, default=False)
    is_bookmarked = Column(Boolean, default=False)
    is_downloaded = Column(Boolean, default=False)
    last_watched_at = Column(DateTime, default=utcnow)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class ContentShare(Base):
    __tablename__ = "content_shares"

    id = Column(Integer, primary_key=True, index=True)
    content_id = Column(Integer, nullable=False)
    content_type = Column(String(20), nullable=False)  # video, audio, workshop
    share_token = Column(String(64), unique=True, index=True, nullable=False)
    shared_by_farmer_id = Column(Integer, nullable=True)
    expires_at = Column(DateTime, nullable=True)
    access_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
