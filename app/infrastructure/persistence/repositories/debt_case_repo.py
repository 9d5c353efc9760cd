"""Debt case repository. Returns application DTOs."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.case import (
    CaseGroupTotals,
    CaseListFilter,
    CaseScope,
    DebtCaseCreate,
    DebtCaseResult,
    OfficerCaseStats,
)
from app.domain.enums import UserRole
from app.infrastructure.persistence.models.debt_case import DebtCase
from app.infrastructure.persistence.models.user import Employee
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils import ensure_utc, utc_now


def _case_to_result(c: DebtCase) -> DebtCaseResult:
    """Map ORM DebtCase to application DebtCaseResult."""
    return DebtCaseResult(
        case_id=c.case_id,
        customer_code=c.customer_code,
        customer_name=c.customer_name,
        outstanding_debt=Decimal(c.outstanding_debt),
        case_type=c.case_type,
        status=c.status,
        assigned_employee_code=c.assigned_employee_code,
        created_at=ensure_utc(c.created_at),
        updated_at=ensure_utc(c.updated_at),
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _as_decimal(value: Any) -> Decimal:
    """SUM() result as Decimal; NULL (no rows) is zero."""
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _apply_scope(stmt: Select[Any], scope: CaseScope) -> Select[Any]:
    """Restrict a debt_cases select to scope, joining the assigned officer when needed."""
    conditions = []
    if scope.dept is not None or scope.branch_code is not None:
        stmt = stmt.join(Employee, Employee.employee_code == DebtCase.assigned_employee_code)
        if scope.dept is not None:
            conditions.append(Employee.dept == scope.dept)
        if scope.branch_code is not None:
            conditions.append(Employee.branch_code == scope.branch_code)
    if scope.assigned_employee_code is not None:
        conditions.append(DebtCase.assigned_employee_code == scope.assigned_employee_code)
    return stmt.where(*conditions) if conditions else stmt


class DebtCaseRepository(BaseRepository[DebtCase]):
    """Debt case repository keyed by case_id, unique on (customer_code, case_type)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DebtCase, "case_id")

    async def get_by_id(self, case_id: str) -> DebtCaseResult | None:
        row = await self._get(case_id)
        return _case_to_result(row) if row else None

    async def find_by_customer(
        self, customer_code: str, case_type: str
    ) -> DebtCaseResult | None:
        result = await self.db.execute(
            select(DebtCase).where(
                DebtCase.customer_code == customer_code,
                DebtCase.case_type == case_type,
            )
        )
        row = result.scalar_one_or_none()
        return _case_to_result(row) if row else None

    async def create(self, data: DebtCaseCreate) -> DebtCaseResult:
        row = await self._add(
            DebtCase(
                customer_code=data.customer_code,
                customer_name=data.customer_name,
                outstanding_debt=data.outstanding_debt,
                case_type=data.case_type,
                assigned_employee_code=data.assigned_employee_code,
            )
        )
        return _case_to_result(row)

    async def update_import_fields(
        self,
        case_id: str,
        outstanding_debt: Decimal,
        assigned_employee_code: str,
    ) -> DebtCaseResult | None:
        """Overwrite outstanding_debt and assigned_employee_code only."""
        row = await self._get(case_id)
        if row is None:
            return None
        row.outstanding_debt = outstanding_debt
        row.assigned_employee_code = assigned_employee_code
        row.updated_at = utc_now()
        await self.db.flush()
        await self.db.refresh(row)
        return _case_to_result(row)

    async def update_status(self, case_id: str, status: str) -> DebtCaseResult | None:
        row = await self._get(case_id)
        if row is None:
            return None
        row.status = status
        row.updated_at = utc_now()
        await self.db.flush()
        await self.db.refresh(row)
        return _case_to_result(row)

    async def touch(self, case_id: str) -> None:
        await self.db.execute(
            update(DebtCase).where(DebtCase.case_id == case_id).values(updated_at=utc_now())
        )

    async def list_cases(
        self, scope: CaseScope, filters: CaseListFilter
    ) -> tuple[list[DebtCaseResult], int]:
        """Return (page ordered by updated_at desc, total matching scope and filters)."""
        conditions = []
        stmt = _apply_scope(select(DebtCase), scope)
        if filters.case_type:
            conditions.append(DebtCase.case_type == filters.case_type)
        if filters.status:
            conditions.append(DebtCase.status == filters.status)
        if filters.search and filters.search.strip():
            pattern = f"%{_escape_like(filters.search.strip()[:100])}%"
            conditions.append(
                or_(
                    DebtCase.customer_code.ilike(pattern, escape="\\"),
                    DebtCase.customer_name.ilike(pattern, escape="\\"),
                )
            )
        if conditions:
            stmt = stmt.where(*conditions)

        total_result = await self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        )
        total = total_result.scalar() or 0

        result = await self.db.execute(
            stmt.order_by(DebtCase.updated_at.desc(), DebtCase.case_id)
            .offset(filters.skip)
            .limit(filters.limit)
        )
        return [_case_to_result(c) for c in result.scalars().all()], total

    async def totals_by_type_and_status(self, scope: CaseScope) -> list[CaseGroupTotals]:
        """Case count and debt sum per (case_type, status) within scope."""
        stmt = _apply_scope(
            select(
                DebtCase.case_type,
                DebtCase.status,
                func.count(DebtCase.case_id),
                func.sum(DebtCase.outstanding_debt),
            ),
            scope,
        ).group_by(DebtCase.case_type, DebtCase.status)
        result = await self.db.execute(stmt)
        return [
            CaseGroupTotals(
                case_type=case_type,
                status=status,
                case_count=count,
                outstanding_debt=_as_decimal(total),
            )
            for case_type, status, count, total in result.all()
        ]

    async def officer_case_stats(self, scope: CaseScope) -> list[OfficerCaseStats]:
        """Officers (employee role) within scope with their case load, busiest first.

        Officers without cases are included with a zero count.
        """
        case_count = func.count(DebtCase.case_id)
        stmt = (
            select(
                Employee.employee_code,
                Employee.fullname,
                case_count,
                func.sum(DebtCase.outstanding_debt),
            )
            .select_from(Employee)
            .outerjoin(DebtCase, DebtCase.assigned_employee_code == Employee.employee_code)
            .where(Employee.role == UserRole.EMPLOYEE.value)
        )
        if scope.dept is not None:
            stmt = stmt.where(Employee.dept == scope.dept)
        if scope.branch_code is not None:
            stmt = stmt.where(Employee.branch_code == scope.branch_code)
        if scope.assigned_employee_code is not None:
            stmt = stmt.where(Employee.employee_code == scope.assigned_employee_code)
        stmt = stmt.group_by(Employee.employee_code, Employee.fullname).order_by(
            case_count.desc(), Employee.employee_code
        )
        result = await self.db.execute(stmt)
        return [
            OfficerCaseStats(
                employee_code=code,
                fullname=fullname,
                case_count=count,
                outstanding_debt=_as_decimal(total),
            )
            for code, fullname, count, total in result.all()
        ]
