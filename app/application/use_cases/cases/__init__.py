"""Case use cases: spreadsheet import, case operations and dashboard statistics."""

from app.application.use_cases.cases.case_import import CaseImportService, CaseUpsertReconciler
from app.application.use_cases.cases.case_operations import CaseService
from app.application.use_cases.cases.dashboard import DashboardService

__all__ = [
    "CaseImportService",
    "CaseService",
    "CaseUpsertReconciler",
    "DashboardService",
]
