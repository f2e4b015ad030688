from enum import Enum
from typing import Optional

from app.services.errors import InvalidActionError, InvalidInputError


class MatchStatus(str, Enum):
    liked = "liked"
    disliked = "disliked"
    passed = "passed"

    @classmethod
    def parse(cls, action) -> "MatchStatus":
        """Convert a raw action string into a MatchStatus, once, at the boundary."""
        if isinstance(action, cls):
            return action
        try:
            return cls(action)
        except ValueError:
            raise InvalidActionError()

    @classmethod
    def parse_filter(cls, status_filter) -> Optional["MatchStatus"]:
        # "" and "all" mean no filter
        if status_filter is None or status_filter in ("", "all"):
            return None
        try:
            return cls(status_filter)
        except ValueError:
            raise InvalidInputError("status must be one of: liked, disliked, passed, all")
