"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.case_document_repo import (
    CaseDocumentRepository,
)
from app.infrastructure.persistence.repositories.case_update_repo import CaseUpdateRepository
from app.infrastructure.persistence.repositories.debt_case_repo import DebtCaseRepository
from app.infrastructure.persistence.repositories.employee_repo import EmployeeRepository

__all__ = [
    "BaseRepository",
    "CaseDocumentRepository",
    "CaseUpdateRepository",
    "DebtCaseRepository",
    "EmployeeRepository",
]
