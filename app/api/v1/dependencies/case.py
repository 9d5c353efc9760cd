"""Case repositories and services (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.use_cases.cases import CaseImportService, CaseService, DashboardService
from app.core.config import get_settings
from app.infrastructure.external.spreadsheet import read_spreadsheet_rows
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    CaseUpdateRepository,
    DebtCaseRepository,
    EmployeeRepository,
)


async def get_case_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> CaseService:
    """Case service on the request transaction."""
    return CaseService(
        case_repo=DebtCaseRepository(db),
        update_repo=CaseUpdateRepository(db),
        employee_repo=EmployeeRepository(db),
    )


async def get_case_import_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CaseImportService:
    """Import service on a plain session; the reconciler commits per customer."""
    return CaseImportService(
        case_repo=DebtCaseRepository(db),
        spreadsheet_reader=read_spreadsheet_rows,
        max_import_size=get_settings().max_import_size,
    )


async def get_dashboard_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DashboardService:
    """Read-only dashboard queries."""
    return DashboardService(case_repo=DebtCaseRepository(db))
