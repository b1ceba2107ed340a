"""
Error taxonomy shared by the services and the HTTP layer.

Every error carries the HTTP status it maps to and a default message; the
handlers in ``api.errors`` render them as ``{"status", "message"}`` bodies.
"""

from __future__ import annotations

from typing import Optional


class TaskTrackerError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmail(TaskTrackerError):
    status_code = 400
    default_message = "User already exists"


class ActivationMismatch(TaskTrackerError):
    status_code = 400
    default_message = "Invalid code"


class InvalidCredentials(TaskTrackerError):
    status_code = 401
    default_message = "Invalid credentials"


class InvalidToken(TaskTrackerError):
    """Missing, malformed, tampered or expired bearer token."""

    status_code = 401
    default_message = "Invalid token"


class ValidationError(TaskTrackerError):
    status_code = 400
    default_message = "Missing required field"


class NotFound(TaskTrackerError):
    status_code = 404
    default_message = "Not found"


class StoreUnavailable(TaskTrackerError):
    status_code = 500
    default_message = "Store unavailable"
