"""Which debt cases an employee may see, by role.

- administrator: every case
- director / deputy_director: cases whose officer works in the same branch
- manager / deputy_manager: cases whose officer is in the same department and branch
- employee: cases assigned to them
"""

from __future__ import annotations

import logging

from app.application.dtos.case import CaseScope, DebtCaseResult
from app.application.dtos.user import CurrentUser, EmployeeResult
from app.domain.enums import DIRECTOR_ROLES, MANAGER_ROLES, UserRole
from app.domain.exceptions import AuthorizationException

logger = logging.getLogger(__name__)


def _role(user: CurrentUser) -> UserRole | None:
    try:
        return UserRole(user.role)
    except ValueError:
        return None


class CaseAccessPolicy:
    """Builds listing scopes and checks single-case access."""

    def own_scope(self, user: CurrentUser) -> CaseScope:
        return CaseScope(assigned_employee_code=user.employee_code)

    def department_scope(self, user: CurrentUser) -> CaseScope:
        """Scope for manager roles.

        Raises:
            AuthorizationException: If the caller has no department or branch.
        """
        if not user.dept or not user.branch_code:
            raise AuthorizationException(
                message="User department or branch information not available"
            )
        return CaseScope(dept=user.dept, branch_code=user.branch_code)

    def branch_scope(self, user: CurrentUser) -> CaseScope:
        """Scope for director roles; administrators get every case.

        Raises:
            AuthorizationException: If a director has no branch.
        """
        if _role(user) is UserRole.ADMINISTRATOR:
            return CaseScope()
        if not user.branch_code:
            raise AuthorizationException(message="User branch information not available")
        return CaseScope(branch_code=user.branch_code)

    def dashboard_scope(self, user: CurrentUser) -> CaseScope:
        """Listing scope matching the caller's management level.

        Raises:
            AuthorizationException: Employees, or missing department/branch information.
        """
        role = _role(user)
        if role in MANAGER_ROLES:
            return self.department_scope(user)
        if role in DIRECTOR_ROLES or role is UserRole.ADMINISTRATOR:
            return self.branch_scope(user)
        raise AuthorizationException(resource="dashboard", action="read")

    def can_access(
        self,
        user: CurrentUser,
        debt_case: DebtCaseResult,
        officer: EmployeeResult | None,
    ) -> bool:
        """True if user may read or act on debt_case; officer is the assigned employee."""
        role = _role(user)
        if role is UserRole.ADMINISTRATOR:
            return True
        if debt_case.assigned_employee_code == user.employee_code:
            return True
        if officer is None:
            return False
        if role in DIRECTOR_ROLES:
            return bool(user.branch_code) and officer.branch_code == user.branch_code
        if role in MANAGER_ROLES:
            return (
                bool(user.dept)
                and bool(user.branch_code)
                and officer.dept == user.dept
                and officer.branch_code == user.branch_code
            )
        return False

    def ensure_access(
        self,
        user: CurrentUser,
        debt_case: DebtCaseResult,
        officer: EmployeeResult | None,
    ) -> None:
        """Raise AuthorizationException unless can_access()."""
        if not self.can_access(user, debt_case, officer):
            logger.info(
                "Case access denied: %s (%s) on case %s",
                user.employee_code,
                user.role,
                debt_case.case_id,
            )
            raise AuthorizationException(resource="case", action="access")
