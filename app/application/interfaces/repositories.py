"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.case import (
        CaseGroupTotals,
        CaseListFilter,
        CaseScope,
        CaseUpdateResult,
        DebtCaseCreate,
        DebtCaseResult,
        OfficerCaseStats,
    )
    from app.application.dtos.document import CaseDocumentCreate, CaseDocumentResult
    from app.application.dtos.user import EmployeeResult


class IDebtCaseRepository(Protocol):
    """Protocol for debt case repository (DIP).

    commit() and rollback() let a batch import make each customer its own
    unit of work.
    """

    async def get_by_id(self, case_id: str) -> DebtCaseResult | None:
        """Return case by ID."""

    async def find_by_customer(
        self, customer_code: str, case_type: str
    ) -> DebtCaseResult | None:
        """Return the case keyed by (customer_code, case_type)."""

    async def create(self, data: DebtCaseCreate) -> DebtCaseResult:
        """Create a case with the store's default status."""

    async def update_import_fields(
        self,
        case_id: str,
        outstanding_debt: Decimal,
        assigned_employee_code: str,
    ) -> DebtCaseResult | None:
        """Overwrite only outstanding debt and assigned officer."""

    async def update_status(self, case_id: str, status: str) -> DebtCaseResult | None:
        """Set status and bump updated_at."""

    async def touch(self, case_id: str) -> None:
        """Bump updated_at (after a journal entry)."""

    async def list_cases(
        self, scope: CaseScope, filters: CaseListFilter
    ) -> tuple[list[DebtCaseResult], int]:
        """Return (page of cases newest-updated first, total matching)."""

    async def totals_by_type_and_status(self, scope: CaseScope) -> list[CaseGroupTotals]:
        """Return case count and debt sum per (case_type, status) within scope."""

    async def officer_case_stats(self, scope: CaseScope) -> list[OfficerCaseStats]:
        """Return each in-scope officer's case count and debt, busiest first."""

    async def commit(self) -> None:
        """Commit the current unit of work."""

    async def rollback(self) -> None:
        """Discard the current unit of work."""


class ICaseUpdateRepository(Protocol):
    """Protocol for the case journal repository (DIP)."""

    async def create(
        self, case_id: str, update_content: str, created_by_employee_code: str
    ) -> CaseUpdateResult:
        """Append a journal entry."""

    async def list_by_case(
        self, case_id: str, skip: int = 0, limit: int = 20
    ) -> list[CaseUpdateResult]:
        """Return journal entries for case (newest first)."""

    async def count_by_case(self, case_id: str) -> int:
        """Return number of journal entries for case."""


class ICaseDocumentRepository(Protocol):
    """Protocol for case document repository (DIP)."""

    async def create(self, data: CaseDocumentCreate) -> CaseDocumentResult:
        """Record a stored document."""

    async def get_by_id(self, document_id: str) -> CaseDocumentResult | None:
        """Return document by ID."""

    async def list_by_case(self, case_id: str) -> list[CaseDocumentResult]:
        """Return documents of case (newest first)."""

    async def delete(self, document_id: str) -> bool:
        """Delete the record. Returns True if a row was removed."""


class IEmployeeRepository(Protocol):
    """Protocol for employee lookups (DIP)."""

    async def get_by_employee_code(self, employee_code: str) -> EmployeeResult | None:
        """Return employee by code."""
