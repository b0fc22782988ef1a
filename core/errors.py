"""Error taxonomy surfaced to the dashboard.

Background units never raise into the UI loop; their exceptions travel inside
completion messages and are converted with ``as_app_error`` where they are
consumed. Cancellation is kept apart from every other failure.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple


class ErrorCategory(Enum):
    IO = "io"
    PARSING = "parsing"
    OPERATION = "operation"
    VALIDATION = "validation"
    DEPENDENCY = "dependency"


DEFAULT_RECOVERY_HINTS: Dict[ErrorCategory, Tuple[str, ...]] = {
    ErrorCategory.IO: (
        "Check file permissions",
        "Verify the file path is correct",
        "Try again or contact support if the issue persists",
    ),
    ErrorCategory.PARSING: (
        "Check the file format is correct",
        "Verify the file content is valid",
        "Try a different file",
    ),
    ErrorCategory.OPERATION: (
        "Retry the operation",
        "Check if all prerequisites are satisfied",
        "Restart the application if the error persists",
    ),
    ErrorCategory.VALIDATION: (
        "Review your input and try again",
        "Check the field requirements",
    ),
    ErrorCategory.DEPENDENCY: (
        "Ensure all required services are available",
        "Check your installation or configuration",
        "Restart the application",
    ),
}


class AppError(Exception):
    def __init__(
        self,
        category: ErrorCategory,
        title: str,
        message: str,
        *,
        details: str = "",
        recovery_hints: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(f"{title}: {message}")
        self.category = category
        self.title = title
        self.message = message
        self.details = details
        if recovery_hints is None:
            recovery_hints = list(DEFAULT_RECOVERY_HINTS.get(category, ()))
        self.recovery_hints = list(recovery_hints)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.title}: {self.message} ({self.cause})"
        return f"{self.title}: {self.message}"

    def with_details(self, details: str) -> "AppError":
        self.details = details
        return self

    def with_recovery_hints(self, *hints: str) -> "AppError":
        self.recovery_hints = list(hints)
        return self

    def display_message(self) -> str:
        if self.details:
            return f"{self.message}\n\n{self.details}"
        return self.message

    def recovery_message(self) -> str:
        if not self.recovery_hints:
            return "Please try again or contact support."
        lines = ["To recover:"]
        lines.extend(f"{idx}. {hint}" for idx, hint in enumerate(self.recovery_hints, start=1))
        return "\n".join(lines)


def io_error(title: str, message: str, cause: Optional[BaseException] = None) -> AppError:
    return AppError(ErrorCategory.IO, title, message, cause=cause)


def parsing_error(title: str, message: str, cause: Optional[BaseException] = None) -> AppError:
    return AppError(ErrorCategory.PARSING, title, message, cause=cause)


def operation_error(title: str, message: str, cause: Optional[BaseException] = None) -> AppError:
    return AppError(ErrorCategory.OPERATION, title, message, cause=cause)


def validation_error(title: str, message: str, cause: Optional[BaseException] = None) -> AppError:
    return AppError(ErrorCategory.VALIDATION, title, message, cause=cause)


def dependency_error(title: str, message: str, cause: Optional[BaseException] = None) -> AppError:
    return AppError(ErrorCategory.DEPENDENCY, title, message, cause=cause)


class OperationCancelled(Exception):
    """Raised by background work that observed its cancel signal."""

    def __init__(self, message: str = "operation cancelled"):
        super().__init__(message)


def is_cancellation(exc: Optional[BaseException]) -> bool:
    if exc is None:
        return False
    if isinstance(exc, OperationCancelled):
        return True
    return isinstance(exc, AppError) and isinstance(exc.cause, OperationCancelled)


def raise_if_cancelled(cancel_event) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelled()


def as_app_error(exc: BaseException, title: str = "Operation Failed") -> AppError:
    """Wrap foreign exceptions so every surfaced error has hints."""
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, FileNotFoundError):
        return io_error(title, f"File not found: {exc.filename or exc}", exc)
    if isinstance(exc, (PermissionError, IsADirectoryError)):
        return io_error(title, str(exc), exc)
    if isinstance(exc, OSError):
        return io_error(title, str(exc) or exc.__class__.__name__, exc)
    if isinstance(exc, ValueError):
        return validation_error(title, str(exc), exc)
    return operation_error(title, str(exc) or exc.__class__.__name__, exc)


__all__ = [
    "ErrorCategory",
    "AppError",
    "DEFAULT_RECOVERY_HINTS",
    "io_error",
    "parsing_error",
    "operation_error",
    "validation_error",
    "dependency_error",
    "OperationCancelled",
    "is_cancellation",
    "raise_if_cancelled",
    "as_app_error",
]
