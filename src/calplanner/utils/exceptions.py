"""Custom exceptions for CalPlanner."""

from typing import Optional


class CalPlannerError(Exception):
    """Base exception for CalPlanner errors."""


class FeedUnavailable(CalPlannerError):
    """Raised when a calendar feed cannot be fetched or decoded."""


class NotFound(CalPlannerError):
    """Raised when a referenced project, calendar or module does not exist."""


class MalformedInput(CalPlannerError):
    """Raised when a payload is invalid, before anything is written."""

    def __init__(self, message: str, details: Optional[list] = None):
        super().__init__(message)
        self.details = details or []


class ConfigurationError(CalPlannerError):
    """Raised when configuration is invalid."""


class StorageError(CalPlannerError):
    """Raised when the database rejects a unit of work."""
