"""Error types for ocr-narrator.

The correction engine itself never raises in normal operation: an empty
dictionary, a blank fragment or two empty strings all have defined fallback
values. These exceptions come from the edges (reading dictionary files,
configuration and recorded traces) and are either degraded by the caller or
reported by the CLI.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from ocr_narrator.logging import get_logger

logger = get_logger(__name__)


class ErrorCategory(str, Enum):
    """Categories of errors for handling decisions."""

    VALIDATION = "validation"  # Bad input data
    CONFIGURATION = "configuration"  # Bad settings
    RESOURCE = "resource"  # Missing or unreadable file
    INTERNAL = "internal"  # Bug in code


class NarratorError(Exception):
    """Base exception for ocr-narrator errors.

    Attributes:
        message: Human-readable error message
        category: Error category for handling
        context: Additional context information
        recoverable: Whether the engine can carry on after this error
    """

    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        context: dict | None = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (context: {self.context})"
        return self.message


class ValidationError(NarratorError):
    """Input data could not be parsed or validated."""

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class ConfigurationError(NarratorError):
    """Engine configuration is missing or invalid."""

    category = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class ResourceError(NarratorError):
    """A file the engine depends on is missing or unreadable."""

    category = ErrorCategory.RESOURCE

    def __init__(
        self,
        message: str,
        context: dict | None = None,
        recoverable: bool = False,
    ):
        super().__init__(message, context, recoverable=recoverable)


class DictionaryError(ResourceError):
    """The reference dictionary could not be read.

    Recoverable: the engine keeps running with an empty dictionary and
    simply stops correcting words.
    """

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=True)


class TraceFormatError(ValidationError):
    """A recorded frame trace contains a malformed line.

    Attributes:
        line_number: 1-indexed line that failed to parse
    """

    def __init__(self, message: str, line_number: int, context: dict | None = None):
        super().__init__(message, {"line": line_number, **(context or {})})
        self.line_number = line_number


class ErrorContext:
    """Context manager that logs failures of a named operation.

    Never suppresses the exception.
    """

    def __init__(
        self,
        operation: str,
        context: dict | None = None,
    ):
        """Initialize error context.

        Args:
            operation: Name of the operation being performed
            context: Additional fields included in the log record
        """
        self.operation = operation
        self.context = context or {}
        self.error: Exception | None = None

    def __enter__(self) -> "ErrorContext":
        logger.debug(f"Starting operation: {self.operation}")
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: Any) -> bool:
        if exc_val is None:
            logger.debug(f"Completed operation: {self.operation}")
            return False

        self.error = exc_val
        logger.error(
            f"Error in {self.operation}: {exc_val}",
            extra={
                "operation": self.operation,
                "error_type": type(exc_val).__name__,
                **self.context,
            },
        )

        return False


def format_error_for_display(error: Exception) -> str:
    """Format an error message for user display.

    Args:
        error: Error to format

    Returns:
        Human-readable error message
    """
    if isinstance(error, NarratorError):
        category = error.category.value
        if error.context:
            context_str = ", ".join(f"{k}={v}" for k, v in error.context.items())
            return f"[{category}] {error.message} ({context_str})"
        return f"[{category}] {error.message}"

    return f"[error] {type(error).__name__}: {error}"
