"""Dashboard API: case statistics for managers and directors."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_dashboard_service, require_roles
from app.application.dtos.user import CurrentUser
from app.application.use_cases.cases import DashboardService
from app.domain.enums import UserRole
from app.schemas.dashboard import DashboardStatsResponse

router = APIRouter()

_require_management = require_roles(
    UserRole.MANAGER,
    UserRole.DEPUTY_MANAGER,
    UserRole.DIRECTOR,
    UserRole.DEPUTY_DIRECTOR,
    UserRole.ADMINISTRATOR,
)


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    current_user: Annotated[CurrentUser, Depends(_require_management)],
    dashboard_svc: Annotated[DashboardService, Depends(get_dashboard_service)],
):
    """Case totals by type and status plus per-officer case counts within the caller's scope."""
    stats = await dashboard_svc.get_stats(current_user)
    return DashboardStatsResponse.model_validate(stats)
