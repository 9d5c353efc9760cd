"""Document operations: upload (stage, relocate, record) and query/download/delete."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import aiofiles.os

from app.application.dtos.document import (
    CaseDocumentCreate,
    CaseDocumentResult,
    DocumentDownload,
)
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import ICaseDocumentRepository
from app.application.use_cases.cases.case_operations import CaseService
from app.domain.enums import DocumentType
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.exceptions import StorageNotFoundError, StoragePermissionError

if TYPE_CHECKING:
    from app.infrastructure.external.storage.path_safety import SafeStorageRoot
    from app.infrastructure.external.storage.relocator import DocumentRelocator
    from app.infrastructure.external.storage.staging import AsyncReadable, UploadStagingArea

logger = logging.getLogger(__name__)


def size_in_kb(size: int) -> int:
    """Whole kilobytes, rounding halves up."""
    return int(size / 1024 + 0.5)


def upload_journal_text(original_filename: str, document_type: str, size: int) -> str:
    label = DocumentType.parse(document_type).journal_label
    return f'Đã tải lên tài liệu "{original_filename}" ({label}, {size_in_kb(size)} KB)'


def delete_journal_text(original_filename: str, document_type: str, size: int) -> str:
    label = DocumentType.parse(document_type).journal_label
    return f'Đã xóa tài liệu "{original_filename}" ({label}, {size_in_kb(size)} KB)'


class DocumentUploadService:
    """Stages an incoming file, moves it into the case folder and records it."""

    def __init__(
        self,
        case_service: CaseService,
        document_repo: ICaseDocumentRepository,
        staging: UploadStagingArea,
        relocator: DocumentRelocator,
        root: SafeStorageRoot,
    ) -> None:
        self.case_service = case_service
        self.document_repo = document_repo
        self.staging = staging
        self.relocator = relocator
        self.root = root

    async def upload_document(
        self,
        case_id: str,
        user: CurrentUser,
        stream: AsyncReadable,
        original_filename: str,
        content_type: str | None,
        document_type: str | None,
    ) -> CaseDocumentResult:
        """Store a document for an accessible case and journal the upload.

        Raises:
            ResourceNotFoundException / AuthorizationException: Case missing or out of scope.
            UploadRejectedException: File refused by the staging area.
            DocumentRelocationError: Moving into the case folder failed.
        """
        debt_case = await self.case_service.get_accessible_case(case_id, user)
        doc_type = DocumentType.parse(document_type)

        staged = await self.staging.stage(stream, original_filename, content_type)
        final_path = await self.relocator.relocate(staged, debt_case, user, doc_type.value)
        relative = self.root.relative_path(final_path)
        if relative is None:
            await self._remove_quietly(final_path)
            raise StoragePermissionError(staged.stored_name, "record")

        try:
            document = await self.document_repo.create(
                CaseDocumentCreate(
                    case_id=debt_case.case_id,
                    original_filename=staged.original_filename,
                    file_path=relative,
                    mime_type=staged.content_type,
                    file_size=staged.size,
                    document_type=doc_type.value,
                    uploaded_by_employee_code=user.employee_code,
                )
            )
            await self.case_service.record_journal(
                debt_case.case_id,
                user.employee_code,
                upload_journal_text(staged.original_filename, doc_type.value, staged.size),
            )
        except Exception:
            # Record not written; do not leave an unreferenced file in the case folder
            await self._remove_quietly(final_path)
            raise
        logger.info(
            "Document %s uploaded to case %s by %s", document.document_id, case_id, user.employee_code
        )
        return document

    async def _remove_quietly(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except OSError as e:
            logger.warning("Could not remove file %s: %s", path, e)


class DocumentQueryService:
    """Lists, describes, resolves for download, and deletes case documents."""

    def __init__(
        self,
        case_service: CaseService,
        document_repo: ICaseDocumentRepository,
        root: SafeStorageRoot,
    ) -> None:
        self.case_service = case_service
        self.document_repo = document_repo
        self.root = root

    async def list_documents(self, case_id: str, user: CurrentUser) -> list[CaseDocumentResult]:
        await self.case_service.get_accessible_case(case_id, user)
        return await self.document_repo.list_by_case(case_id)

    async def get_document(self, document_id: str, user: CurrentUser) -> CaseDocumentResult:
        """Return document metadata; raise ResourceNotFoundException if not found."""
        document = await self.document_repo.get_by_id(document_id)
        if document is None:
            raise ResourceNotFoundException("document", document_id)
        await self.case_service.get_accessible_case(document.case_id, user)
        return document

    async def prepare_download(self, document_id: str, user: CurrentUser) -> DocumentDownload:
        """Resolve the stored file inside the safe root.

        Raises:
            StoragePermissionError: Stored path escapes or is invalid.
            StorageNotFoundError: File missing or not a regular file.
        """
        document = await self.get_document(document_id, user)
        absolute = self.root.resolve_stored(document.file_path)
        if not await aiofiles.os.path.isfile(absolute):
            logger.warning("Stored file missing for document %s: %s", document_id, document.file_path)
            raise StorageNotFoundError(document.file_path)
        return DocumentDownload(
            absolute_path=str(absolute),
            original_filename=document.original_filename,
            mime_type=document.mime_type,
            file_size=document.file_size,
        )

    async def delete_document(self, document_id: str, user: CurrentUser) -> CaseDocumentResult:
        """Delete the record and journal the deletion, then remove the file (best effort).

        The file is only touched once the database writes have gone through,
        so a failed delete never leaves a record pointing at a missing file.
        """
        document = await self.get_document(document_id, user)
        deleted = await self.document_repo.delete(document_id)
        if not deleted:
            raise ResourceNotFoundException("document", document_id)
        await self.case_service.record_journal(
            document.case_id,
            user.employee_code,
            delete_journal_text(document.original_filename, document.document_type, document.file_size),
        )

        absolute = self.root.resolve_within_root(document.file_path)
        if absolute is None:
            logger.warning("Not removing file for document %s: stored path denied", document_id)
        else:
            try:
                await aiofiles.os.remove(absolute)
            except FileNotFoundError:
                logger.info("File for document %s already gone: %s", document_id, document.file_path)
            except OSError as e:
                logger.warning("Could not remove file for document %s: %s", document_id, e)
        logger.info("Document %s deleted by %s", document_id, user.employee_code)
        return document
