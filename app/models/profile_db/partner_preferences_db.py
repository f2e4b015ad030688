from sqlalchemy import Column, Boolean, Integer, DateTime, ForeignKey, JSON, CheckConstraint
from app.core.database import Base
from app.models.profile_db.profile_db import utcnow


class PartnerPreferences(Base):
    __tablename__ = "partner_preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_profile_id = Column(Integer, ForeignKey("user_profiles.id"), unique=True, nullable=False, index=True)

    min_age_years = Column(Integer, nullable=True)
    max_age_years = Column(Integer, nullable=True)
    min_height_cm = Column(Integer, nullable=True)
    max_height_cm = Column(Integer, nullable=True)
    accept_physically_challenged = Column(Boolean, nullable=False, default=True)

    # empty list means "no preference"
    preferred_communities = Column(JSON, nullable=False, default=list)
    preferred_marital_status = Column(JSON, nullable=False, default=list)
    preferred_professions = Column(JSON, nullable=False, default=list)
    preferred_profession_types = Column(JSON, nullable=False, default=list)
    preferred_education_levels = Column(JSON, nullable=False, default=list)
    preferred_home_districts = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "min_age_years IS NULL OR max_age_years IS NULL OR min_age_years <= max_age_years",
            name="age_range_check",
        ),
        CheckConstraint(
            "min_height_cm IS NULL OR max_height_cm IS NULL OR min_height_cm <= max_height_cm",
            name="height_pref_range_check",
        ),
    )
