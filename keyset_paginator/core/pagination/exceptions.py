"""Pagination exceptions.

Custom exceptions for cursor pagination that give callers a clear signal
about what went wrong, instead of raw base64/parsing errors.

Failures raised by the query executor are not wrapped here: they propagate
to the caller unchanged.
"""
from __future__ import annotations

from typing import Any


class PaginationError(Exception):
    """Base exception for pagination operations.

    Attributes:
        message: Error description
        details: Additional context about the error
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize pagination error.

        Args:
            message: Error description
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidCursorError(PaginationError, ValueError):
    """Cursor string could not be decoded.

    Raised for malformed base64, missing separators, undeclared keys or
    values that do not parse under their declared type. This is a rejected
    request (400-like), never treated as "no cursor".

    Attributes:
        cursor: The offending cursor string
        reason: Short description of the failure
    """

    def __init__(self, cursor: str, reason: str):
        """Initialize invalid cursor error.

        Args:
            cursor: The cursor string supplied by the caller
            reason: Why decoding failed
        """
        self.cursor = cursor
        self.reason = reason
        super().__init__(f"Invalid cursor: {reason}", details={"cursor": cursor})

    def __repr__(self) -> str:
        """Repr for debugging."""
        return f"InvalidCursorError(cursor={self.cursor!r}, reason={self.reason!r})"


class PaginatorConfigError(PaginationError, ValueError):
    """Paginator was configured or used incorrectly.

    Raised for key names containing cursor delimiters, a non-positive
    limit, an unknown order, or a paginator instance being reused.
    """

    def __init__(self, message: str, setting: str | None = None):
        """Initialize configuration error.

        Args:
            message: Error description
            setting: Name of the offending setting (if applicable)
        """
        details = {"setting": setting} if setting else {}
        super().__init__(message, details=details)


__all__ = ["InvalidCursorError", "PaginationError", "PaginatorConfigError"]
