"""Storage dependencies (composition root): safe root, staging area, relocator."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.core.config import get_settings
from app.infrastructure.external.storage import (
    DocumentPlacementPlanner,
    DocumentRelocator,
    SafeStorageRoot,
    UploadStagingArea,
)


def get_safe_storage_root() -> SafeStorageRoot:
    settings = get_settings()
    return SafeStorageRoot(settings.storage_root, max_segment_bytes=settings.max_segment_bytes)


def get_upload_staging_area(
    root: Annotated[SafeStorageRoot, Depends(get_safe_storage_root)],
) -> UploadStagingArea:
    settings = get_settings()
    return UploadStagingArea(
        root,
        staging_dir_name=settings.staging_dir_name,
        max_upload_size=settings.max_upload_size,
    )


def get_document_relocator(
    root: Annotated[SafeStorageRoot, Depends(get_safe_storage_root)],
) -> DocumentRelocator:
    return DocumentRelocator(root, DocumentPlacementPlanner(root.max_segment_bytes))
