"""Domain exceptions for the debt-case application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DebtCaseException(Exception):
    """Base exception for all application errors.

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
        """Serialize for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DebtCaseException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DebtCaseException):
    """Raised when authentication fails (e.g. invalid or expired token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(DebtCaseException):
    """Raised when the user lacks the role or scope required for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'case', 'document').
            action: Optional action that was attempted (e.g. 'read', 'import').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(DebtCaseException):
    """Raised when a requested resource (case, document, user) does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type.capitalize()} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SqlNotConfiguredException(DebtCaseException):
    """Raised when a database session is requested but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            "SQL database is not configured. Set DATABASE_URL.",
            "SQL_NOT_CONFIGURED",
        )


class UploadRejectedException(DebtCaseException):
    """Raised when an incoming file is refused before it is staged.

    Covers MIME types outside the allow-list, executable-like extensions,
    oversize payloads and unusable filenames. The message is user-displayable.
    """

    def __init__(self, message: str, reason: str, filename: str | None = None) -> None:
        details: dict[str, Any] = {"reason": reason}
        if filename is not None:
            details["filename"] = filename
        super().__init__(message, "UPLOAD_REJECTED", details)


class SpreadsheetFormatException(DebtCaseException):
    """Raised when an import payload is not a readable spreadsheet.

    This is the fatal batch failure: it is raised before any row is
    processed, so nothing is partially imported.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, "SPREADSHEET_FORMAT_ERROR")


class CaseStatusUnchangedException(DebtCaseException):
    """Raised when a status change request repeats the current status."""

    def __init__(self, case_id: str, status: str) -> None:
        super().__init__(
            f"Case {case_id} already has status '{status}'",
            "CASE_STATUS_UNCHANGED",
            {"case_id": case_id, "status": status},
        )
