"""Case document repository. Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.document import CaseDocumentCreate, CaseDocumentResult
from app.infrastructure.persistence.models.case_document import CaseDocument
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils import ensure_utc


def _create_to_document(d: CaseDocumentCreate) -> CaseDocument:
    """Map CaseDocumentCreate (write-model) to ORM CaseDocument."""
    return CaseDocument(
        case_id=d.case_id,
        original_filename=d.original_filename,
        file_path=d.file_path,
        mime_type=d.mime_type,
        file_size=d.file_size,
        document_type=d.document_type,
        uploaded_by_employee_code=d.uploaded_by_employee_code,
    )


def _document_to_result(d: CaseDocument) -> CaseDocumentResult:
    return CaseDocumentResult(
        document_id=d.document_id,
        case_id=d.case_id,
        original_filename=d.original_filename,
        file_path=d.file_path,
        mime_type=d.mime_type,
        file_size=d.file_size,
        document_type=d.document_type,
        uploaded_by_employee_code=d.uploaded_by_employee_code,
        uploaded_at=ensure_utc(d.uploaded_at),
    )


class CaseDocumentRepository(BaseRepository[CaseDocument]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CaseDocument, "document_id")

    async def create(self, data: CaseDocumentCreate) -> CaseDocumentResult:
        row = await self._add(_create_to_document(data))
        return _document_to_result(row)

    async def get_by_id(self, document_id: str) -> CaseDocumentResult | None:
        row = await self._get(document_id)
        return _document_to_result(row) if row else None

    async def list_by_case(self, case_id: str) -> list[CaseDocumentResult]:
        result = await self.db.execute(
            select(CaseDocument)
            .where(CaseDocument.case_id == case_id)
            .order_by(CaseDocument.uploaded_at.desc(), CaseDocument.document_id.desc())
        )
        return [_document_to_result(d) for d in result.scalars().all()]

    async def delete(self, document_id: str) -> bool:
        result = await self.db.execute(
            delete(CaseDocument).where(CaseDocument.document_id == document_id)
        )
        return (result.rowcount or 0) > 0
