"""Domain exceptions for the mediahub application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class MediaHubException(Exception):
    """Base exception for all mediahub application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an error response body (status code is added by the handler)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(MediaHubException):
    """Raised when input validation or a business rule on input fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(MediaHubException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(MediaHubException):
    """Raised when the actor may not perform the operation (forbidden)."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'user').
            action: Optional action that was attempted (e.g. 'delete').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action and message == "Permission denied":
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class UserNotFoundException(MediaHubException):
    """Raised when a target user id does not resolve under the requested visibility."""

    def __init__(self, user_id: str) -> None:
        """Initialize with the user id that was not found.

        Args:
            user_id: The requested user id.
        """
        super().__init__("User not found", "USER_NOT_FOUND", {"user_id": user_id})


class UserAlreadyExistsException(MediaHubException):
    """Raised when creating a user whose email is already registered."""

    def __init__(self) -> None:
        super().__init__("User exists", "USER_ALREADY_EXISTS", {})


class DuplicateEmailException(MediaHubException):
    """Raised when updating a user to an email already used by another account."""

    def __init__(self) -> None:
        super().__init__(
            "Email already in use by another account",
            "DUPLICATE_EMAIL",
            {},
        )


class DuplicateStorageLabelException(MediaHubException):
    """Raised when a storage label is already assigned to another account."""

    def __init__(self) -> None:
        super().__init__(
            "Storage label already in use by another account",
            "DUPLICATE_STORAGE_LABEL",
            {},
        )


class SqlNotConfiguredException(MediaHubException):
    """Raised when an operation requires the SQL database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class JobQueueClosedException(MediaHubException):
    """Raised when a job is queued while the worker is not running."""

    def __init__(self, job_name: str) -> None:
        super().__init__(
            f"Job queue is not accepting work: {job_name}",
            "JOB_QUEUE_CLOSED",
            {"job_name": job_name},
        )
