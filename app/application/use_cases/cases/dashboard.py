"""Dashboard statistics for managers and directors."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from app.application.dtos.case import CaseGroupTotals, DashboardStats, OfficerCaseStats
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import IDebtCaseRepository
from app.application.services.case_access import CaseAccessPolicy
from app.domain.enums import CaseStatus, CaseType

logger = logging.getLogger(__name__)

# Cases nobody has moved past the first stages yet
PROCESSING_STATUSES = frozenset({CaseStatus.NEW.value, CaseStatus.PROCESSING.value})


def summarize(
    groups: Iterable[CaseGroupTotals], officers: list[OfficerCaseStats]
) -> DashboardStats:
    """Fold per (case_type, status) totals into dashboard figures."""
    counts = {"all": 0, CaseType.INTERNAL.value: 0, CaseType.EXTERNAL.value: 0}
    debts = {key: Decimal("0") for key in counts}
    by_status = {status: 0 for status in CaseStatus.values()}
    for group in groups:
        for key in ("all", group.case_type):
            if key in counts:
                counts[key] += group.case_count
                debts[key] += group.outstanding_debt
        by_status[group.status] = by_status.get(group.status, 0) + group.case_count
    return DashboardStats(
        total_cases=counts["all"],
        total_outstanding_debt=debts["all"],
        internal_cases=counts[CaseType.INTERNAL.value],
        internal_outstanding_debt=debts[CaseType.INTERNAL.value],
        external_cases=counts[CaseType.EXTERNAL.value],
        external_outstanding_debt=debts[CaseType.EXTERNAL.value],
        completed_cases=by_status[CaseStatus.COMPLETED.value],
        processing_cases=sum(by_status[s] for s in PROCESSING_STATUSES),
        cases_by_status=by_status,
        officers=officers,
    )


class DashboardService:
    """Case totals and officer workloads within the caller's management scope."""

    def __init__(
        self,
        case_repo: IDebtCaseRepository,
        access_policy: CaseAccessPolicy | None = None,
    ) -> None:
        self.case_repo = case_repo
        self.access_policy = access_policy or CaseAccessPolicy()

    async def get_stats(self, user: CurrentUser) -> DashboardStats:
        """Raises AuthorizationException for callers without a management role."""
        scope = self.access_policy.dashboard_scope(user)
        groups = await self.case_repo.totals_by_type_and_status(scope)
        officers = await self.case_repo.officer_case_stats(scope)
        logger.debug("Dashboard for %s over %s", user.employee_code, scope)
        return summarize(groups, officers)
