"""Case API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import CaseStatus


class CaseResponse(BaseModel):
    """Debt case as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    case_id: str
    customer_code: str
    customer_name: str
    outstanding_debt: Decimal
    case_type: str
    status: str
    assigned_employee_code: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CaseListResponse(BaseModel):
    """Paginated case listing."""

    items: list[CaseResponse]
    total: int
    page: int
    limit: int


class CaseUpdateCreateRequest(BaseModel):
    """Request body for POST /cases/{case_id}/updates."""

    content: str = Field(..., min_length=1, max_length=5000)


class CaseUpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    update_id: str
    case_id: str
    update_content: str
    created_by_employee_code: str
    created_at: datetime | None = None


class CaseUpdateListResponse(BaseModel):
    items: list[CaseUpdateResponse]
    total: int
    page: int
    limit: int


class CaseStatusChangeRequest(BaseModel):
    """Request body for PATCH /cases/{case_id}/status."""

    status: CaseStatus


class ImportSummaryResponse(BaseModel):
    """Batch summary of a spreadsheet import."""

    model_config = ConfigDict(from_attributes=True)

    total_rows_in_file: int
    processed_customers: int
    created: int
    updated: int
    errors: list[str]
