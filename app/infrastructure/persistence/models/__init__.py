"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.case_document import CaseDocument
from app.infrastructure.persistence.models.case_update import CaseUpdate
from app.infrastructure.persistence.models.debt_case import DebtCase
from app.infrastructure.persistence.models.mixins import CreatedAtMixin, TimestampMixin
from app.infrastructure.persistence.models.user import Employee

__all__ = [
    "CaseDocument",
    "CaseUpdate",
    "CreatedAtMixin",
    "DebtCase",
    "Employee",
    "TimestampMixin",
]
