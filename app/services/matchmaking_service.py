import time
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from kombu.exceptions import OperationalError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.logging_config import setup_logger, log_user_action
from app.models.match_db import match_crud
from app.models.profile_db import profile_crud
from app.services.errors import (
    InvalidInputError,
    MatchActionFailedError,
    ProfileNotFoundError,
    RecommendationTimeoutError,
)
from app.services.match_status import MatchStatus
from app.services.matching_config import HardFilters, MatchWeights
from app.services.pagination import (
    LIST_DEFAULT_LIMIT,
    RECOMMENDATION_DEFAULT_LIMIT,
    build_pagination,
    clamp_pagination,
    paginate,
)
from app.services.pair_locks import PairLockRegistry, pair_locks
from app.services.profile_projection import to_match_history_item, to_mutual_match_data, to_recommended_profile
from app.services.scoring import determine_match_reasons, rank_profiles

logger = setup_logger("matrimony.matchmaking")


class Deadline:
    def __init__(self, timeout: Optional[float], clock=time.monotonic):
        self.clock = clock
        self.expires_at = None if timeout is None else clock() + timeout

    def check(self, stage: str):
        if self.expires_at is not None and self.clock() > self.expires_at:
            raise RecommendationTimeoutError(f"Recommendation deadline exceeded while {stage}")


class MatchmakingService:
    def __init__(
        self,
        db: Session,
        weights: MatchWeights,
        hard_filters: HardFilters,
        notifier=None,
        locks: PairLockRegistry = pair_locks,
        default_timeout: Optional[float] = None,
        clock=None,
    ):
        self.db = db
        self.weights = weights
        self.hard_filters = hard_filters
        self.notifier = notifier
        self.locks = locks
        self.default_timeout = default_timeout
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    # recommendations

    def get_recommended_matches(
        self,
        user_id: UUID,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        limit, offset = clamp_pagination(limit, offset, RECOMMENDATION_DEFAULT_LIMIT)
        deadline = Deadline(timeout if timeout is not None else self.default_timeout)
        now = self.clock()

        profile = profile_crud.get_profile_by_user_id(self.db, user_id)
        if profile is None:
            raise ProfileNotFoundError()

        preferences = profile_crud.get_partner_preferences(self.db, profile.id)
        deadline.check("loading preferences")

        try:
            excluded_ids = match_crud.get_matched_profile_ids(self.db, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Failed to get matched profile IDs for user {user_id}: {e}")
            excluded_ids = []
        deadline.check("loading excluded profiles")

        candidates = match_crud.get_potential_profiles(
            self.db, profile, excluded_ids, preferences, self.hard_filters, today=now.date()
        )
        deadline.check("fetching candidates")

        ranked = rank_profiles(candidates, preferences, self.weights, now)
        page = [
            to_recommended_profile(candidate, determine_match_reasons(candidate, preferences, now), now.date())
            for candidate in paginate(ranked, limit, offset)
        ]
        deadline.check("ranking candidates")

        if not page:
            logger.info(f"No matches found for user {user_id}")

        return page, build_pagination(len(ranked), limit, offset)

    # match actions

    def record_match_action(self, user_id: UUID, profile_id: int, action) -> bool:
        target = self._resolve_target(user_id, profile_id)
        status = MatchStatus.parse(action)

        _, is_mutual_match = self._apply_action(user_id, target.user_id, status)
        log_user_action(
            logger, user_id, f"{status.value} profile {profile_id}",
            "mutual match created" if is_mutual_match else None,
        )

        if status == MatchStatus.liked:
            self._notify_like(user_id, target.user_id)

        return is_mutual_match

    def update_match_action(self, user_id: UUID, profile_id: int, action):
        target = self._resolve_target(user_id, profile_id)
        status = MatchStatus.parse(action)

        was_mutual_match, is_mutual_match = self._apply_action(user_id, target.user_id, status)
        was_mutual_match_broken = was_mutual_match and not is_mutual_match

        if was_mutual_match_broken:
            logger.info(f"Mutual match deactivated: user {user_id} changed action on profile {profile_id} to {status.value}")
        log_user_action(logger, user_id, f"updated action on profile {profile_id} to {status.value}")

        return is_mutual_match, was_mutual_match_broken

    def _resolve_target(self, user_id: UUID, profile_id: int):
        if profile_id is None or profile_id <= 0:
            raise InvalidInputError("profile_id must be a positive integer")

        target = profile_crud.get_profile_by_id(self.db, profile_id)
        if target is None:
            raise ProfileNotFoundError("Target profile not found")
        if target.user_id == user_id:
            raise InvalidInputError("Cannot record an action on your own profile")
        return target

    def _apply_action(self, user_id: UUID, target_id: UUID, status: MatchStatus):
        """Write the action and re-derive the pair's mutual match in one transaction.

        Returns (mutual match was active before, mutual match is active now).
        """
        now = self.clock()
        with self.locks.hold(user_id, target_id):
            try:
                match_crud.lock_pair(self.db, user_id, target_id)
                was_mutual_match = match_crud.check_for_mutual_match(self.db, user_id, target_id)
                match_crud.record_match_action(self.db, user_id, target_id, status, now)
                is_mutual_match = self._sync_mutual_match(user_id, target_id, status, now)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to record match action {user_id} -> {target_id}: {e}", exc_info=True)
                raise MatchActionFailedError() from e

        return was_mutual_match, is_mutual_match

    def _sync_mutual_match(self, user_id: UUID, target_id: UUID, status: MatchStatus, now: datetime) -> bool:
        mutual_match = match_crud.get_mutual_match(self.db, user_id, target_id, for_update=True)

        if status != MatchStatus.liked:
            if mutual_match is not None and mutual_match.is_active:
                match_crud.deactivate_mutual_match(self.db, user_id, target_id, now)
            return False

        if mutual_match is not None and not mutual_match.is_active:
            # a retracted match needs a fresh like from both sides
            match_crud.mark_confirmed(mutual_match, user_id)
            if not (mutual_match.user_1_confirmed and mutual_match.user_2_confirmed):
                return False

        reverse = match_crud.get_match_action(self.db, target_id, user_id)
        if reverse is None or reverse.status != MatchStatus.liked.value:
            return False

        match_crud.create_mutual_match(self.db, user_id, target_id, now)
        logger.info(f"Mutual match active between {user_id} and {target_id}")
        return True

    def _notify_like(self, user_id: UUID, target_id: UUID):
        if self.notifier is None:
            return
        try:
            liker = profile_crud.get_profile_by_user_id(self.db, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to get liker profile for notification, user {user_id}: {e}")
            return
        if liker is None:
            logger.warning(f"Liker profile not found for user {user_id}, skipping notification")
            return

        try:
            self.notifier.delay(str(target_id), liker.id, liker.full_name)
        except OperationalError as e:
            logger.error(f"Failed to queue like notification for user {target_id}: {e}")

    # read models

    def get_match_history(
        self,
        user_id: UUID,
        status_filter: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ):
        limit, offset = clamp_pagination(limit, offset, LIST_DEFAULT_LIMIT)
        status = MatchStatus.parse_filter(status_filter)

        rows, total = match_crud.get_match_history(self.db, user_id, status, limit, offset)
        today = self.clock().date()
        items = [to_match_history_item(profile_match, profile, today) for profile_match, profile in rows]
        return items, build_pagination(total, limit, offset)

    def get_mutual_matches(self, user_id: UUID, limit: Optional[int] = None, offset: Optional[int] = None):
        limit, offset = clamp_pagination(limit, offset, LIST_DEFAULT_LIMIT)

        rows, total = match_crud.get_mutual_matches(self.db, user_id, limit, offset)
        today = self.clock().date()
        items = [to_mutual_match_data(mutual_match, profile, today) for mutual_match, profile in rows]
        return items, build_pagination(total, limit, offset)
