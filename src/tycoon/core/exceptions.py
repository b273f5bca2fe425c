"""
Custom exception hierarchy for the Tycoon companion.

Provides typed errors that can be handled consistently across
the core heuristics, services, and API layer.
"""


class TycoonError(Exception):
    """Base exception for all companion errors."""


class ApiError(TycoonError):
    """Remote game API request failed (transport error or bad status)."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(TycoonError):
    """Remote game API returned an unexpected payload shape."""


class ValidationError(TycoonError):
    """Input validation failed."""


class SyncNotFoundError(TycoonError):
    """No trade synchronizer is registered for the game/player pair."""
