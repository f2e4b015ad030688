from typing import Optional, Sequence

from app.schemas.common.page_response import PaginationData

MAX_LIMIT = 50
RECOMMENDATION_DEFAULT_LIMIT = 10
LIST_DEFAULT_LIMIT = 20


def clamp_pagination(limit: Optional[int], offset: Optional[int], default_limit: int):
    if limit is None or limit <= 0:
        limit = default_limit
    limit = min(limit, MAX_LIMIT)
    if offset is None or offset < 0:
        offset = 0
    return limit, offset


def build_pagination(total: int, limit: int, offset: int) -> PaginationData:
    return PaginationData(
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + limit < total,
    )


def paginate(items: Sequence, limit: int, offset: int) -> list:
    if offset >= len(items):
        return []
    return list(items[offset:min(offset + limit, len(items))])
