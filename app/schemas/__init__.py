"""Pydantic request/response schemas for the API."""

from app.schemas.case import (
    CaseListResponse,
    CaseResponse,
    CaseStatusChangeRequest,
    CaseUpdateCreateRequest,
    CaseUpdateListResponse,
    CaseUpdateResponse,
    ImportSummaryResponse,
)
from app.schemas.dashboard import DashboardStatsResponse, OfficerCaseStatsResponse
from app.schemas.document import DocumentResponse
from app.schemas.health import HealthResponse

__all__ = [
    "CaseListResponse",
    "CaseResponse",
    "CaseStatusChangeRequest",
    "CaseUpdateCreateRequest",
    "CaseUpdateListResponse",
    "CaseUpdateResponse",
    "DashboardStatsResponse",
    "DocumentResponse",
    "HealthResponse",
    "ImportSummaryResponse",
    "OfficerCaseStatsResponse",
]
