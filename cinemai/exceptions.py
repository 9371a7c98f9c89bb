"""Error types and user-facing notices for the discovery service."""

from __future__ import annotations

from enum import Enum


class CinemaiError(Exception):
    """Base class for errors raised by the package."""


class AICompletionError(CinemaiError):
    """Raised when the AI completion backend cannot produce a usable answer."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PersistenceCorruptError(CinemaiError):
    """Raised when persisted content cannot be decoded."""


class DiscoveryNotice(str, Enum):
    """Messages surfaced to the user when a discovery call does not succeed."""

    NO_RESULTS = "No recommendations found. Try a different title or mood."
    NO_MORE_RESULTS = "Could not find more similar titles."
    CONNECTION_FAILED = "Something went wrong connecting to the AI."
    REFRESH_FAILED = "Failed to refresh."
