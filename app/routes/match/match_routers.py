from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import setup_logger
from app.core.security import get_current_user_id
from app.schemas.match.match_base import (
    MatchActionIn,
    MatchHistoryOut,
    MutualMatchesOut,
    RecommendedMatchesOut,
    RecordMatchActionOut,
    UpdateMatchActionOut,
)
from app.services.errors import (
    InvalidInputError,
    MatchActionFailedError,
    ProfileNotFoundError,
    RecommendationTimeoutError,
)
from app.services.matching_config import HardFilters, MatchWeights
from app.services.matchmaking_service import MatchmakingService
from app.services.notification_service import send_like_notification_email

logger = setup_logger("matrimony.routes.match")

match_router = APIRouter(prefix="/matches", tags=["Matching"])


def get_matchmaking_service(db: Session = Depends(get_db)) -> MatchmakingService:
    return MatchmakingService(
        db,
        weights=MatchWeights.from_settings(settings),
        hard_filters=HardFilters.from_settings(settings),
        notifier=send_like_notification_email if settings.NOTIFICATIONS_ENABLED else None,
        default_timeout=settings.RECOMMENDATION_TIMEOUT_SECONDS,
    )


def _to_http_exception(e: Exception) -> HTTPException:
    if isinstance(e, ProfileNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InvalidInputError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, RecommendationTimeoutError):
        return HTTPException(status_code=504, detail="Recommendation request timed out")
    if isinstance(e, MatchActionFailedError):
        return HTTPException(status_code=500, detail=str(e))
    logger.error(f"Unexpected matchmaking error: {e}", exc_info=e)
    return HTTPException(status_code=500, detail="Internal server error")


@match_router.get("/recommendations", response_model=RecommendedMatchesOut)
def get_recommended_matches(
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    timeout: Optional[float] = Query(None, gt=0),
    user_id: UUID = Depends(get_current_user_id),
    service: MatchmakingService = Depends(get_matchmaking_service),
):
    try:
        items, pagination = service.get_recommended_matches(user_id, limit, offset, timeout)
    except Exception as e:
        raise _to_http_exception(e)

    return RecommendedMatchesOut(
        message="Recommended matches retrieved successfully" if items else "No matches found",
        items=items,
        pagination=pagination,
    )


@match_router.post("/action", response_model=RecordMatchActionOut)
def record_match_action(
    payload: MatchActionIn,
    user_id: UUID = Depends(get_current_user_id),
    service: MatchmakingService = Depends(get_matchmaking_service),
):
    try:
        is_mutual_match = service.record_match_action(user_id, payload.profile_id, payload.action)
    except Exception as e:
        raise _to_http_exception(e)

    message = "Match action recorded successfully"
    if is_mutual_match:
        message = "It's a match! You both liked each other"
    return RecordMatchActionOut(message=message, is_mutual_match=is_mutual_match)


@match_router.put("/action", response_model=UpdateMatchActionOut)
def update_match_action(
    payload: MatchActionIn,
    user_id: UUID = Depends(get_current_user_id),
    service: MatchmakingService = Depends(get_matchmaking_service),
):
    try:
        is_mutual_match, was_mutual_match_broken = service.update_match_action(
            user_id, payload.profile_id, payload.action
        )
    except Exception as e:
        raise _to_http_exception(e)

    message = "Match action updated successfully"
    if is_mutual_match:
        message = "It's a match! You both liked each other"
    elif was_mutual_match_broken:
        message = "Match action updated, mutual match removed"
    return UpdateMatchActionOut(
        message=message,
        is_mutual_match=is_mutual_match,
        was_mutual_match_broken=was_mutual_match_broken,
    )


@match_router.get("/history", response_model=MatchHistoryOut)
def get_match_history(
    status: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    user_id: UUID = Depends(get_current_user_id),
    service: MatchmakingService = Depends(get_matchmaking_service),
):
    try:
        items, pagination = service.get_match_history(user_id, status, limit, offset)
    except Exception as e:
        raise _to_http_exception(e)

    return MatchHistoryOut(
        message="Match history retrieved successfully",
        items=items,
        pagination=pagination,
    )


@match_router.get("/mutual", response_model=MutualMatchesOut)
def get_mutual_matches(
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    user_id: UUID = Depends(get_current_user_id),
    service: MatchmakingService = Depends(get_matchmaking_service),
):
    try:
        items, pagination = service.get_mutual_matches(user_id, limit, offset)
    except Exception as e:
        raise _to_http_exception(e)

    return MutualMatchesOut(
        message="Mutual matches retrieved successfully",
        items=items,
        pagination=pagination,
    )
