from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from app.schemas.common.page_response import PageResponse
from app.services.profile_enums import (
    Community,
    EducationLevel,
    HomeDistrict,
    MaritalStatus,
    Profession,
    ProfessionType,
)


class MatchActionIn(BaseModel):
    profile_id: int
    action: str


class ProfileSummary(BaseModel):
    full_name: str
    age: int
    height_cm: Optional[int] = None
    physically_challenged: bool
    community: Community
    marital_status: MaritalStatus
    profession: Profession
    profession_type: ProfessionType
    highest_education_level: EducationLevel
    home_district: HomeDistrict
    profile_picture_url: Optional[str] = None


class RecommendedProfile(ProfileSummary):
    id: int
    last_login: datetime
    match_reasons: List[str]


class MatchHistoryItem(ProfileSummary):
    profile_id: int
    action: str
    action_date: datetime


class MutualMatchData(ProfileSummary):
    profile_id: int
    last_login: datetime
    matched_at: datetime


class RecordMatchActionOut(BaseModel):
    success: bool = True
    message: str
    is_mutual_match: bool


class UpdateMatchActionOut(BaseModel):
    success: bool = True
    message: str
    is_mutual_match: bool
    was_mutual_match_broken: bool


RecommendedMatchesOut = PageResponse[RecommendedProfile]
MatchHistoryOut = PageResponse[MatchHistoryItem]
MutualMatchesOut = PageResponse[MutualMatchData]
