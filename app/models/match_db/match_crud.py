import hashlib
from datetime import date, datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, or_, text
from sqlalchemy.orm import Session

from app.models.match_db.match_db import ProfileMatch
from app.models.match_db.match_pair_db import MutualMatch
from app.models.profile_db.partner_preferences_db import PartnerPreferences
from app.models.profile_db.profile_db import UserProfile, utcnow
from app.services.match_status import MatchStatus
from app.services.matching_config import HardFilters
from app.services.profile_enums import NOT_MENTIONED


def canonical_pair(user_id_a: UUID, user_id_b: UUID) -> Tuple[UUID, UUID]:
    if str(user_id_a) > str(user_id_b):
        return user_id_b, user_id_a
    return user_id_a, user_id_b


def pair_lock_key(user_id_a: UUID, user_id_b: UUID) -> int:
    """Signed 64-bit key for the unordered pair, as taken by pg_advisory_xact_lock."""
    user_id_1, user_id_2 = canonical_pair(user_id_a, user_id_b)
    digest = hashlib.blake2b(f"{user_id_1}:{user_id_2}".encode(), digest_size=8).digest()
    return int.from_bytes(digest, "big", signed=True)


def lock_pair(db: Session, user_id_a: UUID, user_id_b: UUID) -> None:
    """Serialize writes on a pair across processes until the transaction ends.

    PostgreSQL only; other backends rely on the in-process pair lock.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": pair_lock_key(user_id_a, user_id_b)})


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:  # Feb 29
        return day.replace(year=day.year - years, day=28)


def get_matched_profile_ids(db: Session, user_id: UUID) -> List[UUID]:
    rows = (
        db.query(ProfileMatch.target_id)
        .filter(ProfileMatch.user_id == user_id, ProfileMatch.is_deleted.is_(False))
        .all()
    )
    return [row[0] for row in rows]


def get_potential_profiles(
    db: Session,
    user_profile: UserProfile,
    exclude_ids: List[UUID],
    preferences: Optional[PartnerPreferences],
    hard_filters: HardFilters,
    today: Optional[date] = None,
) -> List[UserProfile]:
    query = db.query(UserProfile).filter(
        UserProfile.user_id != user_profile.user_id,
        UserProfile.is_deleted.is_(False),
        # brides are shown grooms and vice versa
        UserProfile.is_bride != user_profile.is_bride,
    )

    if exclude_ids:
        query = query.filter(UserProfile.user_id.notin_(exclude_ids))

    if preferences is not None:
        query = apply_hard_filters(query, preferences, hard_filters, today or date.today())

    return query.all()


def apply_hard_filters(query, preferences: PartnerPreferences, hard_filters: HardFilters, today: date):
    if not hard_filters.enabled:
        return query

    # profiles that left a field empty are never filtered out on that field
    if hard_filters.apply_age_filter:
        if preferences.min_age_years is not None:
            latest_birth_date = _years_before(today, preferences.min_age_years)
            query = query.filter(or_(
                UserProfile.date_of_birth <= latest_birth_date,
                UserProfile.date_of_birth.is_(None),
            ))
        if preferences.max_age_years is not None:
            earliest_birth_date = _years_before(today, preferences.max_age_years + 1)
            query = query.filter(or_(
                UserProfile.date_of_birth > earliest_birth_date,
                UserProfile.date_of_birth.is_(None),
            ))

    if hard_filters.apply_height_filter:
        if preferences.min_height_cm is not None:
            query = query.filter(or_(
                UserProfile.height_cm >= preferences.min_height_cm,
                UserProfile.height_cm.is_(None),
            ))
        if preferences.max_height_cm is not None:
            query = query.filter(or_(
                UserProfile.height_cm <= preferences.max_height_cm,
                UserProfile.height_cm.is_(None),
            ))

    if hard_filters.apply_physically_challenged_filter and not preferences.accept_physically_challenged:
        query = query.filter(UserProfile.physically_challenged.is_(False))

    if hard_filters.apply_marital_status_filter and preferences.preferred_marital_status:
        query = query.filter(or_(
            UserProfile.marital_status.in_(list(preferences.preferred_marital_status)),
            UserProfile.marital_status == NOT_MENTIONED,
        ))

    if hard_filters.apply_education_filter and preferences.preferred_education_levels:
        query = query.filter(or_(
            UserProfile.highest_education_level.in_(list(preferences.preferred_education_levels)),
            UserProfile.highest_education_level == NOT_MENTIONED,
        ))

    return query


def get_match_action(db: Session, user_id: UUID, target_id: UUID) -> Optional[ProfileMatch]:
    return (
        db.query(ProfileMatch)
        .filter(
            ProfileMatch.user_id == user_id,
            ProfileMatch.target_id == target_id,
            ProfileMatch.is_deleted.is_(False),
        )
        .first()
    )


def record_match_action(
    db: Session, user_id: UUID, target_id: UUID, status: MatchStatus, now: Optional[datetime] = None
) -> ProfileMatch:
    now = now or utcnow()
    existing = (
        db.query(ProfileMatch)
        .filter(ProfileMatch.user_id == user_id, ProfileMatch.target_id == target_id)
        .first()
    )

    if existing:
        existing.status = status.value
        existing.updated_at = now
        existing.is_deleted = False
    else:
        existing = ProfileMatch(
            user_id=user_id,
            target_id=target_id,
            status=status.value,
            created_at=now,
            updated_at=now,
        )
        db.add(existing)

    db.flush()
    return existing


def get_mutual_match(db: Session, user_id_a: UUID, user_id_b: UUID, for_update: bool = False) -> Optional[MutualMatch]:
    user_id_1, user_id_2 = canonical_pair(user_id_a, user_id_b)
    query = db.query(MutualMatch).filter(
        MutualMatch.user_id_1 == user_id_1,
        MutualMatch.user_id_2 == user_id_2,
        MutualMatch.is_deleted.is_(False),
    )
    if for_update:
        query = query.with_for_update()
    return query.first()


def check_for_mutual_match(db: Session, user_id_a: UUID, user_id_b: UUID) -> bool:
    mutual_match = get_mutual_match(db, user_id_a, user_id_b)
    return mutual_match is not None and mutual_match.is_active


def mark_confirmed(mutual_match: MutualMatch, user_id: UUID) -> None:
    if mutual_match.user_id_1 == user_id:
        mutual_match.user_1_confirmed = True
    elif mutual_match.user_id_2 == user_id:
        mutual_match.user_2_confirmed = True


def create_mutual_match(db: Session, user_id_a: UUID, user_id_b: UUID, now: Optional[datetime] = None) -> MutualMatch:
    """Create the pair's mutual match, or reactivate the existing row."""
    now = now or utcnow()
    user_id_1, user_id_2 = canonical_pair(user_id_a, user_id_b)

    mutual_match = get_mutual_match(db, user_id_1, user_id_2, for_update=True)
    if mutual_match is None:
        mutual_match = MutualMatch(
            user_id_1=user_id_1,
            user_id_2=user_id_2,
            matched_at=now,
            created_at=now,
            updated_at=now,
        )
        db.add(mutual_match)
    elif not mutual_match.is_active:
        mutual_match.is_active = True
        mutual_match.matched_at = now
        mutual_match.updated_at = now

    mutual_match.user_1_confirmed = True
    mutual_match.user_2_confirmed = True
    db.flush()
    return mutual_match


def deactivate_mutual_match(db: Session, user_id_a: UUID, user_id_b: UUID, now: Optional[datetime] = None) -> bool:
    """Deactivate an active mutual match. Returns False when there was none."""
    mutual_match = get_mutual_match(db, user_id_a, user_id_b, for_update=True)
    if mutual_match is None or not mutual_match.is_active:
        return False

    mutual_match.is_active = False
    mutual_match.user_1_confirmed = False
    mutual_match.user_2_confirmed = False
    mutual_match.updated_at = now or utcnow()
    db.flush()
    return True


def get_match_history(
    db: Session, user_id: UUID, status: Optional[MatchStatus], limit: int, offset: int
) -> Tuple[List[Tuple[ProfileMatch, UserProfile]], int]:
    query = (
        db.query(ProfileMatch, UserProfile)
        .join(UserProfile, ProfileMatch.target_id == UserProfile.user_id)
        .filter(
            ProfileMatch.user_id == user_id,
            ProfileMatch.is_deleted.is_(False),
            UserProfile.is_deleted.is_(False),
        )
    )
    if status is not None:
        query = query.filter(ProfileMatch.status == status.value)

    total = query.count()
    rows = (
        query.order_by(ProfileMatch.updated_at.desc(), ProfileMatch.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total


def get_mutual_matches(
    db: Session, user_id: UUID, limit: int, offset: int
) -> Tuple[List[Tuple[MutualMatch, UserProfile]], int]:
    query = (
        db.query(MutualMatch, UserProfile)
        .join(
            UserProfile,
            or_(
                and_(MutualMatch.user_id_1 == user_id, MutualMatch.user_id_2 == UserProfile.user_id),
                and_(MutualMatch.user_id_2 == user_id, MutualMatch.user_id_1 == UserProfile.user_id),
            ),
        )
        .filter(
            MutualMatch.is_active.is_(True),
            MutualMatch.is_deleted.is_(False),
            UserProfile.is_deleted.is_(False),
        )
    )

    total = query.count()
    rows = (
        query.order_by(MutualMatch.matched_at.desc(), MutualMatch.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total
