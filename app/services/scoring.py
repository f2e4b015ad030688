"""
Compatibility scoring and ranking of candidate profiles.

Hard constraints (age, height, marital status, education, physically
challenged) are applied by the candidate query. Only soft affinities are
scored here:

    score = community_term * w_community
          + profession_term * w_profession
          + location_term * w_location
          + recency_term * w_recency

Each affinity term is 1.0 on a match and 0.5 otherwise, whether the
preference set is empty or simply does not contain the candidate's value.
Without preferences the score is the bare recency term.

Everything in this module is pure: the same profile, preferences, weights
and ``now`` always give the same score and the same order.
"""

from datetime import datetime, timezone
from typing import List, Optional

from app.services.matching_config import MatchWeights

MATCH_SCORE = 1.0
NEUTRAL_SCORE = 0.5

# (hours since last login, score); anything older scores RECENCY_FLOOR
RECENCY_STEPS = (
    (24, 1.0),
    (72, 0.8),
    (168, 0.6),
    (336, 0.4),
)
RECENCY_FLOOR = 0.2
RECENTLY_ACTIVE_HOURS = 24 * 7


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def hours_since(value: datetime, now: datetime) -> float:
    return (as_utc(now) - as_utc(value)).total_seconds() / 3600


def calculate_recency_score(last_login: datetime, now: Optional[datetime] = None) -> float:
    hours_ago = hours_since(last_login, now or datetime.now(timezone.utc))
    for limit_hours, score in RECENCY_STEPS:
        if hours_ago < limit_hours:
            return score
    return RECENCY_FLOOR


def _preferred(values) -> set:
    return set(values or ())


def _affinity(value, preferred_values) -> float:
    preferred = _preferred(preferred_values)
    if preferred and value in preferred:
        return MATCH_SCORE
    return NEUTRAL_SCORE


def calculate_match_score(profile, prefs, weights: MatchWeights, now: Optional[datetime] = None) -> float:
    recency = calculate_recency_score(profile.last_login, now)
    if prefs is None:
        return recency

    score = 0.0
    score += _affinity(profile.community, prefs.preferred_communities) * weights.community
    score += _affinity(profile.profession, prefs.preferred_professions) * weights.profession
    score += _affinity(profile.home_district, prefs.preferred_home_districts) * weights.location
    score += recency * weights.recency
    return score


def rank_profiles(profiles, prefs, weights: MatchWeights, now: Optional[datetime] = None) -> List:
    """Sort by score, most recent login, then public profile ID."""
    now = now or datetime.now(timezone.utc)
    scored = [(calculate_match_score(profile, prefs, weights, now), profile) for profile in profiles]
    scored.sort(key=lambda item: (
        -item[0],
        -as_utc(item[1].last_login).timestamp(),
        item[1].id,
    ))
    return [profile for _, profile in scored]


def determine_match_reasons(profile, prefs, now: Optional[datetime] = None) -> List[str]:
    if prefs is None:
        return ["Compatible profile"]

    reasons = []
    if profile.community in _preferred(prefs.preferred_communities):
        reasons.append("Community match")
    if profile.profession in _preferred(prefs.preferred_professions):
        reasons.append("Profession match")
    if profile.home_district in _preferred(prefs.preferred_home_districts):
        reasons.append("Location match")

    if not reasons:
        reasons.append("Compatible profile")

    if hours_since(profile.last_login, now or datetime.now(timezone.utc)) < RECENTLY_ACTIVE_HOURS:
        reasons.append("Recently active")

    return reasons
