"""Dashboard API schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class OfficerCaseStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_code: str
    fullname: str
    case_count: int
    outstanding_debt: Decimal


class DashboardStatsResponse(BaseModel):
    """Case totals and officer workloads for GET /dashboard/stats."""

    model_config = ConfigDict(from_attributes=True)

    total_cases: int
    total_outstanding_debt: Decimal
    internal_cases: int
    internal_outstanding_debt: Decimal
    external_cases: int
    external_outstanding_debt: Decimal
    completed_cases: int
    processing_cases: int
    cases_by_status: dict[str, int]
    officers: list[OfficerCaseStatsResponse]
