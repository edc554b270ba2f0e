# cabin_reservations/exceptions.py
"""
Error types raised by the booking core and the API routes.

All of them are HTTPException subclasses so FastAPI renders them as
``{"detail": ...}`` with the right status code without extra handlers.
"""

from typing import Dict, Optional

from fastapi import HTTPException, status


class CabinReservationError(HTTPException):
    """Base class for every error this service reports to a caller."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class BookingValidationError(CabinReservationError):
    """Input that can never be accepted as-is (bad dates, missing fields)."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(CabinReservationError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenActionError(CabinReservationError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, detail: str = "Forbidden"):
        super().__init__(detail)


class NotFoundError(CabinReservationError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(CabinReservationError):
    status_code = status.HTTP_409_CONFLICT


class CapacityExceededError(ConflictError):
    """The cabin cannot take the requested guests for the requested dates."""

    def __init__(self, detail: str, available: int, requested: int):
        super().__init__(detail)
        self.available = available
        self.requested = requested
