"""Error taxonomy for the game night core.

Each error is an ``HTTPException`` so services can raise it directly and FastAPI
renders it without extra handlers. ``DeliveryFailure`` is the exception: it never
reaches the HTTP layer, the invite service turns it into a response field.
"""
from fastapi import HTTPException, status


class GameNightError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed"

    def __init__(self, detail=None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class Unauthorized(GameNightError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not a host or guest of this game night"


class Forbidden(GameNightError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Only the host can do that"


class NotFound(GameNightError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class InvalidTransition(GameNightError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move a game night from {current.value} to {requested.value}")


class Conflict(GameNightError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already exists"


class FeatureLocked(GameNightError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Not available for the current game night status"


class ValidationError(GameNightError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid input"


class DeliveryFailure(Exception):
    """An outbound email could not be delivered."""
