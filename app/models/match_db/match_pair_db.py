from sqlalchemy import Column, Integer, Boolean, DateTime, UniqueConstraint, Uuid
from app.core.database import Base
from app.models.profile_db.profile_db import utcnow


class MutualMatch(Base):
    """One row per unordered pair, stored with user_id_1 < user_id_2 (string order)."""

    __tablename__ = "mutual_matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id_1 = Column(Uuid(as_uuid=True), nullable=False, index=True)
    user_id_2 = Column(Uuid(as_uuid=True), nullable=False, index=True)
    matched_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # cleared on deactivation; each side sets its flag again by re-liking
    user_1_confirmed = Column(Boolean, nullable=False, default=True)
    user_2_confirmed = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_deleted = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("user_id_1", "user_id_2", name="unique_mutual_match"),
    )
