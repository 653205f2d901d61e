"""
Domain exceptions raised by the service layer.

Every exception carries the HTTP status and machine-readable code it maps to;
the handlers in ``skillswap.main`` turn them into ``{"message", "code"}``
JSON responses.
"""
from fastapi import status


class SkillSwapError(Exception):
    """Base class for all business errors."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(SkillSwapError):
    """Missing, invalid or expired credential."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"


class Forbidden(SkillSwapError):
    """Authenticated, but not allowed to perform the action."""
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFound(SkillSwapError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class NotFoundOrUnauthorized(NotFound):
    """
    Swap transition refused.

    Raised both when the swap does not exist, when the actor is not the party
    allowed to make the transition, and when the swap is in the wrong state.
    The three cases are not told apart so that non-parties learn nothing
    about the swap.
    """
    code = "NOT_FOUND_OR_UNAUTHORIZED"


class InvalidInput(SkillSwapError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_INPUT"


class InvalidSwapRequest(InvalidInput):
    """A skill in the swap bundle is not offered by the expected party."""
    code = "INVALID_SWAP_REQUEST"

    def __init__(self, message: str, skill_id: int = None):
        super().__init__(message)
        self.skill_id = skill_id


class DuplicateRating(InvalidInput):
    code = "DUPLICATE_RATING"

    def __init__(self, swap_id: int, rater_id: int):
        super().__init__("You have already rated this swap")
        self.swap_id = swap_id
        self.rater_id = rater_id
