"""Document use cases: upload (write) and query, download, delete (read/remove)."""

from app.application.use_cases.documents.document_operations import (
    DocumentQueryService,
    DocumentUploadService,
)

__all__ = [
    "DocumentQueryService",
    "DocumentUploadService",
]
