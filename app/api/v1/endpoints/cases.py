"""Case API: thin routes delegating to CaseService, CaseImportService and DocumentUploadService."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.api.v1.dependencies import (
    get_case_import_service,
    get_case_service,
    get_current_user,
    get_document_query_service,
    get_document_upload_service,
    require_roles,
)
from app.application.dtos.case import CaseListFilter, CaseListPage
from app.application.dtos.user import CurrentUser
from app.application.use_cases.cases import CaseImportService, CaseService
from app.application.use_cases.documents import DocumentQueryService, DocumentUploadService
from app.core.config import get_settings
from app.domain.enums import CaseStatus, CaseType, DocumentType, UserRole
from app.schemas.case import (
    CaseListResponse,
    CaseResponse,
    CaseStatusChangeRequest,
    CaseUpdateCreateRequest,
    CaseUpdateListResponse,
    CaseUpdateResponse,
    ImportSummaryResponse,
)
from app.schemas.document import DocumentResponse

router = APIRouter()

_require_admin = require_roles(UserRole.ADMINISTRATOR)
_require_manager = require_roles(UserRole.MANAGER, UserRole.DEPUTY_MANAGER)
_require_director = require_roles(
    UserRole.DIRECTOR, UserRole.DEPUTY_DIRECTOR, UserRole.ADMINISTRATOR
)


def _list_filter(
    case_type: CaseType | None = Query(None),
    status: CaseStatus | None = Query(None),
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> CaseListFilter:
    return CaseListFilter(
        case_type=case_type.value if case_type else None,
        status=status.value if status else None,
        search=search,
        page=page,
        limit=limit,
    )


def _page_response(page: CaseListPage) -> CaseListResponse:
    return CaseListResponse(
        items=[CaseResponse.model_validate(c) for c in page.items],
        total=page.total,
        page=page.page,
        limit=page.limit,
    )


async def _read_import_file(file: UploadFile) -> bytes:
    # One byte past the limit so the service can reject oversize payloads
    return await file.read(get_settings().max_import_size + 1)


@router.post("/import", response_model=ImportSummaryResponse)
async def import_internal_cases(
    _: Annotated[CurrentUser, Depends(_require_admin)],
    file: Annotated[UploadFile, File(...)],
    import_svc: Annotated[CaseImportService, Depends(get_case_import_service)],
):
    """Import internal (on-balance-sheet) cases from a core banking extract."""
    summary = await import_svc.import_internal(await _read_import_file(file))
    return ImportSummaryResponse.model_validate(summary)


@router.post("/import-external", response_model=ImportSummaryResponse)
async def import_external_cases(
    _: Annotated[CurrentUser, Depends(_require_admin)],
    file: Annotated[UploadFile, File(...)],
    import_svc: Annotated[CaseImportService, Depends(get_case_import_service)],
):
    """Import external (off-balance-sheet) cases."""
    summary = await import_svc.import_external(await _read_import_file(file))
    return ImportSummaryResponse.model_validate(summary)


@router.get("/my-cases", response_model=CaseListResponse)
async def list_my_cases(
    filters: Annotated[CaseListFilter, Depends(_list_filter)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    case_svc: Annotated[CaseService, Depends(get_case_service)],
):
    """Cases assigned to the caller."""
    return _page_response(await case_svc.list_my_cases(current_user, filters))


@router.get("/department", response_model=CaseListResponse)
async def list_department_cases(
    filters: Annotated[CaseListFilter, Depends(_list_filter)],
    current_user: Annotated[CurrentUser, Depends(_require_manager)],
    case_svc: Annotated[CaseService, Depends(get_case_service)],
):
    """Cases of officers in the caller's department and branch."""
    return _page_response(await case_svc.list_department_cases(current_user, filters))


@router.get("/branch", response_model=CaseListResponse)
async def list_branch_cases(
    filters: Annotated[CaseListFilter, Depends(_list_filter)],
    current_user: Annotated[CurrentUser, Depends(_require_director)],
    case_svc: Annotated[CaseService, Depends(get_case_service)],
):
    """Cases of officers in the caller's branch (all cases for administrators)."""
    return _page_response(await case_svc.list_branch_cases(current_user, filters))


@router.get("/{case_id}", response_model=CaseResponse)
async def get_case(
    case_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    case_svc: Annotated[CaseService, Depends(get_case_service)],
):
    debt_case = await case_svc.get_accessible_case(case_id, current_user)
    return CaseResponse.model_validate(debt_case)


@router.get("/{case_id}/updates", response_model=CaseUpdateListResponse)
async def list_case_updates(
    case_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    case_svc: Annotated[CaseService, Depends(get_case_service)],
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """Journal entries, newest first."""
    items, total = await case_svc.list_updates(case_id, current_user, page=page, limit=limit)
    return CaseUpdateListResponse(
        items=[CaseUpdateResponse.model_validate(u) for u in items],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("/{case_id}/updates", response_model=CaseUpdateResponse, status_code=201)
async def add_case_update(
    case_id: str,
    body: CaseUpdateCreateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    case_svc: Annotated[CaseService, Depends(get_case_service)],
):
    entry = await case_svc.add_update(case_id, current_user, body.content)
    return CaseUpdateResponse.model_validate(entry)


@router.patch("/{case_id}/status", response_model=CaseResponse)
async def change_case_status(
    case_id: str,
    body: CaseStatusChangeRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    case_svc: Annotated[CaseService, Depends(get_case_service)],
):
    updated = await case_svc.change_status(case_id, body.status.value, current_user)
    return CaseResponse.model_validate(updated)


@router.post("/{case_id}/documents", response_model=DocumentResponse, status_code=201)
async def upload_case_document(
    case_id: str,
    file: Annotated[UploadFile, File(...)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    upload_svc: Annotated[DocumentUploadService, Depends(get_document_upload_service)],
    document_type: Annotated[str, Form()] = DocumentType.OTHER.value,
):
    """Upload a document; it is staged, moved into the case folder and recorded."""
    created = await upload_svc.upload_document(
        case_id=case_id,
        user=current_user,
        stream=file,
        original_filename=file.filename or "",
        content_type=file.content_type,
        document_type=document_type,
    )
    return DocumentResponse.model_validate(created)


@router.get("/{case_id}/documents", response_model=list[DocumentResponse])
async def list_case_documents(
    case_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    query_svc: Annotated[DocumentQueryService, Depends(get_document_query_service)],
):
    documents = await query_svc.list_documents(case_id, current_user)
    return [DocumentResponse.model_validate(d) for d in documents]
