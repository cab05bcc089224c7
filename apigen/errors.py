"""Exceptions raised by the generator.

Only structural problems are raised. Recoverable anomalies (unresolvable
property shapes, responses without a schema) are logged as warnings by the
type resolver and replaced with placeholder types.
"""

from __future__ import annotations


class ApiGenError(Exception):
    """Base exception for generator errors."""

    def __init__(self, message: str, location: str | None = None) -> None:
        self.location = location
        full_message = f"{message}" if not location else f"[{location}] {message}"
        super().__init__(full_message)


class MalformedDocument(ApiGenError):
    """Raised when the input is not JSON or does not have the Swagger 2.0 shape."""

    def __init__(
        self,
        message: str,
        location: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message, location)


class SourceError(ApiGenError):
    """Raised when the document source cannot be read or fetched."""

    def __init__(self, message: str, source: str) -> None:
        self.source = source
        super().__init__(message, source)


class ConfigError(ApiGenError):
    """Raised when the configuration record is missing or invalid."""
