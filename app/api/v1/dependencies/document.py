"""Document services (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.dependencies.case import get_case_service
from app.api.v1.dependencies.storage import (
    get_document_relocator,
    get_safe_storage_root,
    get_upload_staging_area,
)
from app.application.use_cases.cases import CaseService
from app.application.use_cases.documents import DocumentQueryService, DocumentUploadService
from app.infrastructure.external.storage import (
    DocumentRelocator,
    SafeStorageRoot,
    UploadStagingArea,
)
from app.infrastructure.persistence.database import get_db_transactional
from app.infrastructure.persistence.repositories import CaseDocumentRepository


async def get_document_upload_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    case_service: Annotated[CaseService, Depends(get_case_service)],
    staging: Annotated[UploadStagingArea, Depends(get_upload_staging_area)],
    relocator: Annotated[DocumentRelocator, Depends(get_document_relocator)],
    root: Annotated[SafeStorageRoot, Depends(get_safe_storage_root)],
) -> DocumentUploadService:
    return DocumentUploadService(
        case_service=case_service,
        document_repo=CaseDocumentRepository(db),
        staging=staging,
        relocator=relocator,
        root=root,
    )


async def get_document_query_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    case_service: Annotated[CaseService, Depends(get_case_service)],
    root: Annotated[SafeStorageRoot, Depends(get_safe_storage_root)],
) -> DocumentQueryService:
    return DocumentQueryService(
        case_service=case_service,
        document_repo=CaseDocumentRepository(db),
        root=root,
    )
