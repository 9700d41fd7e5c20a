"""Custom exception classes for the loading planner.

Pure functions in :mod:`core` never raise on well-typed input; the errors here
belong to the application layer (adapters, services, resize sessions).

Detailed messages and ``details`` are meant for logs. Use
``to_user_message()`` when surfacing an error to an end user.

Exception Hierarchy:
    LoadPlanError (base)
    ├── ConfigurationError (invalid or missing configuration)
    ├── DataError (read-model loading/validation issues)
    ├── ResizeError (interactive resize failures)
    │   ├── DragSessionActiveError (second session for the same loading)
    │   └── ResizeCommitError (mutation rejected or raised; preview rolled back)
    ├── ServerError (mutation gateway/back-end failures)
    └── RetryExhaustedError (retry attempts used up)

Usage:
    >>> from loadplan.exceptions import ResizeCommitError
    >>>
    >>> try:
    ...     controller.handle("L1", PointerUp())
    ... except ResizeCommitError as e:
    ...     notify(e.to_user_message())
"""


class LoadPlanError(Exception):
    """Base exception for all loading planner errors."""

    def __init__(self, message: str, details: dict | None = None, user_message: str | None = None):
        """
        Initialize a loading planner error.

        Args:
            message: Detailed error message for logging
            details: Optional dictionary with additional error context
            user_message: Optional user-friendly message (hides implementation details)
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self._user_message = user_message

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_user_message(self) -> str:
        """Return a user-friendly error message without internal details."""
        if self._user_message:
            return self._user_message
        return self.message


# ===== Configuration Errors =====


class ConfigurationError(LoadPlanError):
    """Raised when application configuration is invalid or missing."""

    pass


# ===== Data Errors =====


class DataError(LoadPlanError):
    """Raised when read-model data cannot be loaded or fails validation."""

    pass


# ===== Resize Errors =====


class ResizeError(LoadPlanError):
    """Base class for interactive resize failures."""

    pass


class DragSessionActiveError(ResizeError):
    """Raised when a resize starts for a loading that already has an active session."""

    def __init__(self, message: str, details: dict | None = None, user_message: str | None = None):
        if user_message is None:
            user_message = "This loading is already being resized."
        super().__init__(message, details, user_message)


class ResizeCommitError(ResizeError):
    """Raised after rollback when the mutation interface rejected or failed an update."""

    def __init__(self, message: str, details: dict | None = None, user_message: str | None = None):
        if user_message is None:
            user_message = "The new dates could not be saved. The loading was restored."
        super().__init__(message, details, user_message)


# ===== Server/Backend Errors =====


class ServerError(LoadPlanError):
    """Raised when the mutation gateway or another back-end call fails.

    Detailed error information is logged but a generic message is shown to users.
    """

    def __init__(self, message: str, details: dict | None = None, user_message: str | None = None):
        if user_message is None:
            user_message = "A server error occurred. Please try again later."
        super().__init__(message, details, user_message)


# ===== Retry Errors =====


class RetryExhaustedError(LoadPlanError):
    """Raised when retry attempts are exhausted for an operation."""

    def __init__(self, message: str, details: dict | None = None, user_message: str | None = None):
        if user_message is None:
            user_message = "The operation failed after multiple attempts. Please try again later."
        super().__init__(message, details, user_message)


__all__ = [
    "LoadPlanError",
    "ConfigurationError",
    "DataError",
    "ResizeError",
    "DragSessionActiveError",
    "ResizeCommitError",
    "ServerError",
    "RetryExhaustedError",
]
