"""Exception hierarchy shared by every tool.

Each tool handler catches ``PiToolsError`` at its boundary and turns it into
an error envelope, so these never reach the MCP dispatcher.
"""
from typing import Iterable, Optional, Tuple


class PiToolsError(Exception):
    """Base class for all tool failures."""


class ValidationError(PiToolsError):
    """Raised when tool input fails its schema.

    Carries ``(field path, message)`` pairs so callers can point at the
    offending field.
    """

    def __init__(self, errors: Iterable[Tuple[str, str]]):
        self.errors = list(errors)
        details = ", ".join(f"{path}: {message}" for path, message in self.errors)
        super().__init__(f"Input validation failed: {details}")


class ConfigurationError(PiToolsError):
    """Raised when a required credential or setting is missing."""


class UpstreamError(PiToolsError):
    """Raised when a provider call fails or returns an unexpected body."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class LocalResourceError(PiToolsError):
    """Raised when a local file cannot be stat'ed or read."""
