class MatchmakingError(Exception):
    """Base class for errors raised by the matchmaking engine."""


class ProfileNotFoundError(MatchmakingError):
    def __init__(self, message: str = "Profile not found"):
        super().__init__(message)


class InvalidInputError(MatchmakingError):
    pass


class InvalidActionError(InvalidInputError):
    def __init__(self, message: str = "action must be one of: liked, disliked, passed"):
        super().__init__(message)


class MatchActionFailedError(MatchmakingError):
    """A match-state write could not be applied; nothing was persisted."""

    def __init__(self, message: str = "Failed to record match action"):
        super().__init__(message)


class RecommendationTimeoutError(MatchmakingError):
    def __init__(self, message: str = "Recommendation request exceeded its deadline"):
        super().__init__(message)
