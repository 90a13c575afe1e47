"""Exception hierarchy for the conversion pipeline.

Fatal failures (unreadable input, browser navigation, persistence) raise a
ConversionError subclass carrying the underlying cause.  Element-level
problems never raise; they degrade to documented defaults and are logged.
"""

from typing import Any, Optional


class ConversionError(Exception):
    """Base exception for all fatal conversion errors."""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {self.cause})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


class SceneParseError(ConversionError):
    """The source document could not be read or parsed."""


class UnsupportedInputError(ConversionError):
    """No ingestion path handles the given input."""


class NavigationError(ConversionError):
    """The headless browser failed to launch, navigate, or capture a slide."""


class PersistenceError(ConversionError):
    """The finished deck could not be written."""


class CanvasLockedError(ConversionError):
    """Canvas dimensions were changed after the first slide was emitted."""
