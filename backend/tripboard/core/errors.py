"""
Error taxonomy for trip workspace operations.

Every error carries the values the caller attempted to submit so that a
failed action can be re-invoked without re-entering input.
"""
from typing import Any, Dict, Optional


class TripboardError(Exception):
    """Base class for all trip workspace errors."""

    status_code: int = 500

    def __init__(self, message: str, attempted: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.attempted = attempted


class ValidationError(TripboardError):
    """Malformed input, rejected before any persistence call."""

    status_code = 422


class NotFoundError(TripboardError):
    """Referenced trip, record or username does not resolve (or is not accessible)."""

    status_code = 404


class ConflictError(TripboardError):
    """Duplicate invite for a user already on the roster."""

    status_code = 409


class TransportError(TripboardError):
    """Any failure communicating with the persistence collaborator."""

    status_code = 502
