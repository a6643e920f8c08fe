"""
Domain errors raised by the service layer.

Each carries the HTTP status it maps to; ``shiptrack.main`` renders them as
``{"message": ...}`` JSON bodies.
"""

from typing import Optional


class ShipTrackError(Exception):
    """Base exception for ShipTrack errors."""

    status_code = 500

    def __init__(self, message: str, headers: Optional[dict] = None):
        self.message = message
        self.headers = headers
        super().__init__(message)


class ValidationError(ShipTrackError):
    """Malformed or out-of-range input."""

    status_code = 400


class UnauthorizedError(ShipTrackError):
    """Missing, invalid or expired credentials."""

    status_code = 401

    def __init__(self, message: str):
        super().__init__(message, headers={'WWW-Authenticate': 'Bearer'})


class NotFoundError(ShipTrackError):
    """No matching resource owned by the requester."""

    status_code = 404


class ConflictError(ShipTrackError):
    """A uniqueness constraint would be violated."""

    status_code = 409


class ServerMisconfigurationError(ShipTrackError):
    """The server lacks configuration it needs, e.g. the signing secret."""

    status_code = 500
