import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, Integer, Date, DateTime, CheckConstraint, Uuid
from app.core.database import Base
from app.services.profile_enums import NOT_MENTIONED


def utcnow():
    return datetime.now(timezone.utc)


class UserProfile(Base):
    __tablename__ = "user_profiles"

    # public profile ID, the only identifier ever shown to other users
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(Uuid(as_uuid=True), unique=True, nullable=False, index=True, default=uuid.uuid4)

    is_bride = Column(Boolean, nullable=False, default=False)
    full_name = Column(String(200), nullable=False, default="")
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    height_cm = Column(Integer, nullable=True)
    physically_challenged = Column(Boolean, nullable=False, default=False)

    community = Column(String(50), nullable=False, default=NOT_MENTIONED)
    marital_status = Column(String(50), nullable=False, default=NOT_MENTIONED)
    profession = Column(String(50), nullable=False, default=NOT_MENTIONED)
    profession_type = Column(String(50), nullable=False, default=NOT_MENTIONED)
    highest_education_level = Column(String(50), nullable=False, default=NOT_MENTIONED)
    home_district = Column(String(50), nullable=False, default=NOT_MENTIONED)

    profile_picture_url = Column(String(255), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("height_cm IS NULL OR (height_cm >= 130 AND height_cm <= 220)", name="height_range_check"),
    )
