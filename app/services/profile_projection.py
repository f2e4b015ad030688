from datetime import date
from typing import List, Optional

from app.schemas.match.match_base import MatchHistoryItem, MutualMatchData, RecommendedProfile


def calculate_age(date_of_birth: Optional[date], today: Optional[date] = None) -> int:
    """Completed years since date_of_birth; 0 when it is unknown."""
    if date_of_birth is None:
        return 0
    today = today or date.today()
    return today.year - date_of_birth.year - ((today.month, today.day) < (date_of_birth.month, date_of_birth.day))


def _profile_fields(profile, today: Optional[date]) -> dict:
    return dict(
        full_name=profile.full_name,
        age=calculate_age(profile.date_of_birth, today),
        height_cm=profile.height_cm,
        physically_challenged=profile.physically_challenged,
        community=profile.community,
        marital_status=profile.marital_status,
        profession=profile.profession,
        profession_type=profile.profession_type,
        highest_education_level=profile.highest_education_level,
        home_district=profile.home_district,
        profile_picture_url=profile.profile_picture_url,
    )


def to_recommended_profile(profile, match_reasons: List[str], today: Optional[date] = None) -> RecommendedProfile:
    return RecommendedProfile(
        id=profile.id,
        last_login=profile.last_login,
        match_reasons=match_reasons,
        **_profile_fields(profile, today),
    )


def to_match_history_item(profile_match, profile, today: Optional[date] = None) -> MatchHistoryItem:
    return MatchHistoryItem(
        profile_id=profile.id,
        action=profile_match.status,
        action_date=profile_match.updated_at,
        **_profile_fields(profile, today),
    )


def to_mutual_match_data(mutual_match, profile, today: Optional[date] = None) -> MutualMatchData:
    return MutualMatchData(
        profile_id=profile.id,
        last_login=profile.last_login,
        matched_at=mutual_match.matched_at,
        **_profile_fields(profile, today),
    )
