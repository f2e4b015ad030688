from uuid import UUID
from sqlalchemy.orm import Session
from app.models.profile_db.profile_db import UserProfile
from app.models.profile_db.partner_preferences_db import PartnerPreferences


def get_profile_by_user_id(db: Session, user_id: UUID):
    return (
        db.query(UserProfile)
        .filter(UserProfile.user_id == user_id, UserProfile.is_deleted.is_(False))
        .first()
    )


def get_profile_by_id(db: Session, profile_id: int):
    return (
        db.query(UserProfile)
        .filter(UserProfile.id == profile_id, UserProfile.is_deleted.is_(False))
        .first()
    )


def get_partner_preferences(db: Session, profile_id: int):
    return (
        db.query(PartnerPreferences)
        .filter(
            PartnerPreferences.user_profile_id == profile_id,
            PartnerPreferences.is_deleted.is_(False),
        )
        .first()
    )
