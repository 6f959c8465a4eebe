"""Configuration error classes.

Every failure of a load is one of three terminal kinds, one per stage:
SourceError, DecodeError, ValidationError.
"""

from __future__ import annotations

import os


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class InvalidDestinationError(ConfigError, TypeError):
    """Raised when the destination is not a mutable pydantic model instance."""

    pass


class SourceError(ConfigError):
    """Raised when the configuration source cannot be opened or read."""

    def __init__(self, message: str, path: str | os.PathLike[str] | None = None):
        super().__init__(message)
        self.path = path


class DecodeError(ConfigError):
    """Raised when the document is malformed or does not fit the destination."""

    def __init__(self, message: str, path: str | os.PathLike[str] | None = None):
        super().__init__(message)
        self.path = path


class ValidationError(ConfigError):
    """Raised when a decoded configuration fails the required-field check.

    Attributes:
        field: Declared (attribute) name of the offending field
        path: Dot-notation document path of the field from the root record
    """

    def __init__(self, message: str, field: str | None = None, path: str | None = None):
        super().__init__(message)
        self.field = field
        self.path = path


class MissingFieldError(ValidationError):
    """Raised when a required field holds its type's default value."""

    def __init__(self, field: str, path: str | None = None):
        super().__init__(f"missing required config item: {field}", field=field, path=path or field)
