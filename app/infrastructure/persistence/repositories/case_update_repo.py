"""Case journal repository. Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.case import CaseUpdateResult
from app.infrastructure.persistence.models.case_update import CaseUpdate
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils import ensure_utc


def _update_to_result(u: CaseUpdate) -> CaseUpdateResult:
    return CaseUpdateResult(
        update_id=u.update_id,
        case_id=u.case_id,
        update_content=u.update_content,
        created_by_employee_code=u.created_by_employee_code,
        created_at=ensure_utc(u.created_at),
    )


class CaseUpdateRepository(BaseRepository[CaseUpdate]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CaseUpdate, "update_id")

    async def create(
        self, case_id: str, update_content: str, created_by_employee_code: str
    ) -> CaseUpdateResult:
        row = await self._add(
            CaseUpdate(
                case_id=case_id,
                update_content=update_content,
                created_by_employee_code=created_by_employee_code,
            )
        )
        return _update_to_result(row)

    async def list_by_case(
        self, case_id: str, skip: int = 0, limit: int = 20
    ) -> list[CaseUpdateResult]:
        result = await self.db.execute(
            select(CaseUpdate)
            .where(CaseUpdate.case_id == case_id)
            .order_by(CaseUpdate.created_at.desc(), CaseUpdate.update_id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_update_to_result(u) for u in result.scalars().all()]

    async def count_by_case(self, case_id: str) -> int:
        result = await self.db.execute(
            select(func.count(CaseUpdate.update_id)).where(CaseUpdate.case_id == case_id)
        )
        return result.scalar() or 0
