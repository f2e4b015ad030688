from sqlalchemy import Column, Integer, String, Boolean, DateTime, UniqueConstraint, Uuid
from app.core.database import Base
from app.models.profile_db.profile_db import utcnow


class ProfileMatch(Base):
    """Current action of one user towards one target; overwritten on every new action."""

    __tablename__ = "profile_matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    target_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True)  # MatchStatus value
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_deleted = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("user_id", "target_id", name="unique_profile_match"),
    )
