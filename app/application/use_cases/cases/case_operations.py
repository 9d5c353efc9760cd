"""Case reads, the case journal and status changes, all behind the case access policy."""

from __future__ import annotations

import logging

from app.application.dtos.case import (
    CaseListFilter,
    CaseListPage,
    CaseScope,
    CaseUpdateResult,
    DebtCaseResult,
)
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import (
    ICaseUpdateRepository,
    IDebtCaseRepository,
    IEmployeeRepository,
)
from app.application.services.case_access import CaseAccessPolicy
from app.domain.enums import CaseStatus
from app.domain.exceptions import (
    CaseStatusUnchangedException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

MAX_UPDATE_LENGTH = 5000


class CaseService:
    """Case details, listings, journal entries and status changes."""

    def __init__(
        self,
        case_repo: IDebtCaseRepository,
        update_repo: ICaseUpdateRepository,
        employee_repo: IEmployeeRepository,
        access_policy: CaseAccessPolicy | None = None,
    ) -> None:
        self.case_repo = case_repo
        self.update_repo = update_repo
        self.employee_repo = employee_repo
        self.access_policy = access_policy or CaseAccessPolicy()

    async def get_accessible_case(self, case_id: str, user: CurrentUser) -> DebtCaseResult:
        """Return the case if it exists and user may access it.

        Raises:
            ResourceNotFoundException: Unknown case_id.
            AuthorizationException: Case is outside the user's scope.
        """
        debt_case = await self.case_repo.get_by_id(case_id)
        if debt_case is None:
            raise ResourceNotFoundException("case", case_id)
        officer = await self.employee_repo.get_by_employee_code(debt_case.assigned_employee_code)
        self.access_policy.ensure_access(user, debt_case, officer)
        return debt_case

    async def _list(self, scope: CaseScope, filters: CaseListFilter) -> CaseListPage:
        items, total = await self.case_repo.list_cases(scope, filters)
        return CaseListPage(items=items, total=total, page=filters.page, limit=filters.limit)

    async def list_my_cases(self, user: CurrentUser, filters: CaseListFilter) -> CaseListPage:
        return await self._list(self.access_policy.own_scope(user), filters)

    async def list_department_cases(
        self, user: CurrentUser, filters: CaseListFilter
    ) -> CaseListPage:
        return await self._list(self.access_policy.department_scope(user), filters)

    async def list_branch_cases(self, user: CurrentUser, filters: CaseListFilter) -> CaseListPage:
        return await self._list(self.access_policy.branch_scope(user), filters)

    async def record_journal(
        self, case_id: str, employee_code: str, content: str
    ) -> CaseUpdateResult:
        """Append a journal entry and bump the case's updated_at (no access check)."""
        entry = await self.update_repo.create(case_id, content, employee_code)
        await self.case_repo.touch(case_id)
        return entry

    async def add_update(
        self, case_id: str, user: CurrentUser, content: str
    ) -> CaseUpdateResult:
        """Add a free-text journal entry to an accessible case."""
        text = (content or "").strip()
        if not text:
            raise ValidationException("Nội dung cập nhật không được để trống", field="content")
        if len(text) > MAX_UPDATE_LENGTH:
            raise ValidationException(
                f"Nội dung cập nhật tối đa {MAX_UPDATE_LENGTH} ký tự", field="content"
            )
        await self.get_accessible_case(case_id, user)
        return await self.record_journal(case_id, user.employee_code, text)

    async def list_updates(
        self, case_id: str, user: CurrentUser, page: int = 1, limit: int = 20
    ) -> tuple[list[CaseUpdateResult], int]:
        """Return (journal page newest first, total entries)."""
        await self.get_accessible_case(case_id, user)
        skip = (max(page, 1) - 1) * limit
        items = await self.update_repo.list_by_case(case_id, skip=skip, limit=limit)
        total = await self.update_repo.count_by_case(case_id)
        return items, total

    async def change_status(
        self, case_id: str, new_status: str, user: CurrentUser
    ) -> DebtCaseResult:
        """Set a new status and journal the change.

        Raises:
            ValidationException: new_status is not a known status.
            CaseStatusUnchangedException: new_status equals the current status.
        """
        try:
            status = CaseStatus(new_status)
        except ValueError as e:
            raise ValidationException(
                f"Trạng thái không hợp lệ: {new_status}", field="status"
            ) from e
        debt_case = await self.get_accessible_case(case_id, user)
        if debt_case.status == status.value:
            raise CaseStatusUnchangedException(case_id, status.value)

        updated = await self.case_repo.update_status(case_id, status.value)
        if updated is None:
            raise ResourceNotFoundException("case", case_id)
        await self.update_repo.create(
            case_id,
            f'Cập nhật trạng thái từ "{debt_case.status}" sang "{status.value}"',
            user.employee_code,
        )
        logger.info(
            "Case %s status %r -> %r by %s", case_id, debt_case.status, status.value, user.employee_code
        )
        return updated
