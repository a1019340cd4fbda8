"""Tests for domain exceptions (error_code, message, details)."""

import pytest

from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateEmailException,
    DuplicateStorageLabelException,
    JobQueueClosedException,
    MediaHubException,
    SqlNotConfiguredException,
    UserAlreadyExistsException,
    UserNotFoundException,
    ValidationException,
)


def test_mediahub_exception_default_error_code() -> None:
    """Base MediaHubException uses class name as error_code when not provided."""
    exc = MediaHubException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "MediaHubException"
    assert exc.details == {}


def test_mediahub_exception_to_dict() -> None:
    exc = MediaHubException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid format", field="email")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "email"}
    assert ValidationException("Invalid").details == {}


def test_authentication_exception() -> None:
    exc = AuthenticationException()
    assert exc.message == "Authentication failed"
    assert exc.error_code == "AUTHENTICATION_ERROR"


def test_authorization_exception_builds_message_from_resource_and_action() -> None:
    exc = AuthorizationException(resource="user", action="update quota_size_in_bytes")
    assert exc.message == "Permission denied: update quota_size_in_bytes on user"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {"resource": "user", "action": "update quota_size_in_bytes"}


def test_authorization_exception_custom_message() -> None:
    exc = AuthorizationException(message="Cannot delete admin user")
    assert exc.message == "Cannot delete admin user"
    assert exc.details == {}


def test_user_not_found_exception() -> None:
    exc = UserNotFoundException("abc")
    assert exc.message == "User not found"
    assert exc.error_code == "USER_NOT_FOUND"
    assert exc.details == {"user_id": "abc"}


@pytest.mark.parametrize(
    ("exc", "code"),
    [
        (UserAlreadyExistsException(), "USER_ALREADY_EXISTS"),
        (DuplicateEmailException(), "DUPLICATE_EMAIL"),
        (DuplicateStorageLabelException(), "DUPLICATE_STORAGE_LABEL"),
        (SqlNotConfiguredException(), "SERVICE_UNAVAILABLE"),
        (JobQueueClosedException("user-deletion"), "JOB_QUEUE_CLOSED"),
    ],
)
def test_error_codes(exc: MediaHubException, code: str) -> None:
    assert exc.error_code == code
    assert isinstance(exc, MediaHubException)
