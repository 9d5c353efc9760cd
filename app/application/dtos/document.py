"""DTOs for case documents (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CaseDocumentCreate:
    """Input for recording a relocated file. file_path is relative to the storage root."""

    case_id: str
    original_filename: str
    file_path: str
    mime_type: str
    file_size: int
    document_type: str
    uploaded_by_employee_code: str


@dataclass(frozen=True)
class CaseDocumentResult:
    """Case document read-model."""

    document_id: str
    case_id: str
    original_filename: str
    file_path: str
    mime_type: str
    file_size: int
    document_type: str
    uploaded_by_employee_code: str
    uploaded_at: datetime | None = None


@dataclass(frozen=True)
class DocumentDownload:
    """A stored file resolved for streaming."""

    absolute_path: str
    original_filename: str
    mime_type: str
    file_size: int
