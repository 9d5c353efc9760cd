"""Employee repository (read-only lookups)."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import EmployeeResult
from app.infrastructure.persistence.models.user import Employee
from app.infrastructure.persistence.repositories.base import BaseRepository


def _employee_to_result(e: Employee) -> EmployeeResult:
    return EmployeeResult(
        employee_code=e.employee_code,
        fullname=e.fullname,
        role=e.role,
        dept=e.dept,
        branch_code=e.branch_code,
        username=e.username,
    )


class EmployeeRepository(BaseRepository[Employee]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Employee, "employee_code")

    async def get_by_employee_code(self, employee_code: str) -> EmployeeResult | None:
        if not employee_code:
            return None
        row = await self._get(employee_code)
        return _employee_to_result(row) if row else None
