"""DTOs for employees and the authenticated caller."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller, built from verified token claims."""

    employee_code: str
    fullname: str | None
    role: str
    dept: str | None = None
    branch_code: str | None = None


@dataclass(frozen=True)
class EmployeeResult:
    """Employee read-model (used to resolve a case officer's department and branch)."""

    employee_code: str
    fullname: str
    role: str
    dept: str | None
    branch_code: str | None
    username: str | None = None
