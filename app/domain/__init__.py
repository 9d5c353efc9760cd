"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import CaseStatus, CaseType, DocumentType, UserRole
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    CaseStatusUnchangedException,
    DebtCaseException,
    ResourceNotFoundException,
    SpreadsheetFormatException,
    SqlNotConfiguredException,
    UploadRejectedException,
    ValidationException,
)

__all__ = [
    # Enums
    "CaseStatus",
    "CaseType",
    "DocumentType",
    "UserRole",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "CaseStatusUnchangedException",
    "DebtCaseException",
    "ResourceNotFoundException",
    "SpreadsheetFormatException",
    "SqlNotConfiguredException",
    "UploadRejectedException",
    "ValidationException",
]
