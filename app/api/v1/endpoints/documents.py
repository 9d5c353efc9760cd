"""Document API: metadata, download and delete by document id."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from fastapi.responses import FileResponse

from app.api.v1.dependencies import get_current_user, get_document_query_service
from app.application.dtos.user import CurrentUser
from app.application.use_cases.documents import DocumentQueryService
from app.schemas.document import DocumentResponse

router = APIRouter()


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    query_svc: Annotated[DocumentQueryService, Depends(get_document_query_service)],
):
    document = await query_svc.get_document(document_id, current_user)
    return DocumentResponse.model_validate(document)


@router.get("/{document_id}/download")
async def download_document(
    document_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    query_svc: Annotated[DocumentQueryService, Depends(get_document_query_service)],
) -> FileResponse:
    """Stream the stored file; Content-Disposition carries the original filename."""
    download = await query_svc.prepare_download(document_id, current_user)
    return FileResponse(
        download.absolute_path,
        media_type=download.mime_type,
        filename=download.original_filename,
        content_disposition_type="attachment",
    )


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    query_svc: Annotated[DocumentQueryService, Depends(get_document_query_service)],
) -> Response:
    await query_svc.delete_document(document_id, current_user)
    return Response(status_code=204)
