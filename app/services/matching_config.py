from dataclasses import dataclass

from app.core.config import Settings


@dataclass(frozen=True)
class MatchWeights:
    """Non-negative coefficients of the soft-affinity score."""

    community: float = 1.0
    profession: float = 1.0
    location: float = 1.0
    recency: float = 1.0

    def __post_init__(self):
        for name in ("community", "profession", "location", "recency"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} weight must be non-negative, got {getattr(self, name)}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "MatchWeights":
        return cls(
            community=settings.MATCH_WEIGHT_COMMUNITY,
            profession=settings.MATCH_WEIGHT_PROFESSION,
            location=settings.MATCH_WEIGHT_LOCATION,
            recency=settings.MATCH_WEIGHT_RECENCY,
        )


@dataclass(frozen=True)
class HardFilters:
    enabled: bool = True
    apply_age_filter: bool = True
    apply_height_filter: bool = True
    apply_marital_status_filter: bool = True
    apply_physically_challenged_filter: bool = True
    apply_education_filter: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "HardFilters":
        return cls(
            enabled=settings.HARD_FILTERS_ENABLED,
            apply_age_filter=settings.APPLY_AGE_FILTER,
            apply_height_filter=settings.APPLY_HEIGHT_FILTER,
            apply_marital_status_filter=settings.APPLY_MARITAL_STATUS_FILTER,
            apply_physically_challenged_filter=settings.APPLY_PHYSICALLY_CHALLENGED_FILTER,
            apply_education_filter=settings.APPLY_EDUCATION_FILTER,
        )
