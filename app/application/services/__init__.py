"""Application services: row normalization, aggregation and case access policy."""

from app.application.services.case_access import CaseAccessPolicy
from app.application.services.case_aggregator import ACTIONABLE_DEBT_GROUPS, aggregate

__all__ = [
    "ACTIONABLE_DEBT_GROUPS",
    "CaseAccessPolicy",
    "aggregate",
]
