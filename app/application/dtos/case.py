"""DTOs for debt cases, the case journal and case imports (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class DebtCaseCreate:
    """Input for creating a case from an import. Status is left to the store default."""

    customer_code: str
    customer_name: str
    outstanding_debt: Decimal
    case_type: str
    assigned_employee_code: str


@dataclass(frozen=True)
class DebtCaseResult:
    """Debt case read-model."""

    case_id: str
    customer_code: str
    customer_name: str
    outstanding_debt: Decimal
    case_type: str
    status: str
    assigned_employee_code: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class CaseListFilter:
    """Optional filters and paging for case listings."""

    case_type: str | None = None
    status: str | None = None
    search: str | None = None
    page: int = 1
    limit: int = 20

    @property
    def skip(self) -> int:
        return (max(self.page, 1) - 1) * self.limit


@dataclass(frozen=True)
class CaseListPage:
    items: list[DebtCaseResult]
    total: int
    page: int
    limit: int


@dataclass(frozen=True)
class CaseUpdateResult:
    """Journal entry on a case (free text or generated by an action)."""

    update_id: str
    case_id: str
    update_content: str
    created_by_employee_code: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class AggregatedCustomerRecord:
    """One customer's rows from an import, folded into a single case candidate."""

    customer_code: str
    customer_name: str
    outstanding_debt: Decimal
    assigned_employee_code: str
    case_type: str


@dataclass(frozen=True)
class Applied:
    """Row outcome: the case was created or updated."""

    customer_code: str
    created: bool


@dataclass(frozen=True)
class Skipped:
    """Row outcome: nothing was written; reason is user-displayable."""

    customer_code: str
    reason: str


@dataclass(frozen=True)
class ImportSummary:
    """Result of one import call. Returned even when some customers failed."""

    total_rows_in_file: int
    processed_customers: int
    created: int
    updated: int
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CaseScope:
    """Which cases a listing may return. All fields None means every case.

    assigned_employee_code limits to one officer; dept and branch_code limit
    by the assigned officer's department and branch.
    """

    assigned_employee_code: str | None = None
    dept: str | None = None
    branch_code: str | None = None


@dataclass(frozen=True)
class CaseGroupTotals:
    """Case count and debt sum for one (case_type, status) pair."""

    case_type: str
    status: str
    case_count: int
    outstanding_debt: Decimal


@dataclass(frozen=True)
class OfficerCaseStats:
    """Case load of one collection officer."""

    employee_code: str
    fullname: str
    case_count: int
    outstanding_debt: Decimal


@dataclass(frozen=True)
class DashboardStats:
    """Aggregated view of the cases a manager or director oversees."""

    total_cases: int
    total_outstanding_debt: Decimal
    internal_cases: int
    internal_outstanding_debt: Decimal
    external_cases: int
    external_outstanding_debt: Decimal
    completed_cases: int
    processing_cases: int
    cases_by_status: dict[str, int]
    officers: list[OfficerCaseStats] = field(default_factory=list)
