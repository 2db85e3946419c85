"""StashKu exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Argument, parse, and validation errors are raised locally by builders;
configuration and engine errors surface only at dispatch time.
"""

from __future__ import annotations


class StashError(Exception):
    """Base exception for all StashKu failures."""


class StashArgumentError(StashError):
    """Raised when a builder method receives an argument of the wrong kind."""


class StashHeaderKeyError(StashArgumentError):
    """Raised when a request header uses a non-string key."""


class FilterParseError(StashError):
    """Raised for malformed filter expression text.

    Attributes:
        position: Zero-based character offset of the failure.
        token: Offending token text, when one could be isolated.
    """

    def __init__(self, message: str, position: int | None = None, token: str | None = None) -> None:
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
        self.position = position
        self.token = token


class StashValidationError(StashError):
    """Raised when a model property validator rejects a value.

    Attributes:
        property_name: Model property that failed validation.
    """

    def __init__(self, message: str, property_name: str | None = None) -> None:
        super().__init__(message)
        self.property_name = property_name


class StashConfigError(StashError):
    """Raised for invalid runtime or dispatch configuration."""


class StashEngineError(StashError):
    """Raised for opaque storage engine failures."""


class StashDependencyError(StashError):
    """Raised when an optional runtime dependency is missing."""
