"""Folder layout for stored case documents.

Layout under the safe root:
    <uploader>/<customer code>/<Nội bảng|Ngoại bảng>/<document type folder>/<file>
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from app.domain.enums import CaseType, DocumentType
from app.infrastructure.external.storage.path_safety import (
    DEFAULT_MAX_SEGMENT_BYTES,
    sanitize_segment,
    validate_path,
)

BREADCRUMB_ROOT = "Files Xử Lý Nợ"

_SEPARATOR_RE = re.compile(r"[\\/]")


def case_type_folder(case_type: object) -> str:
    """Folder label for a case classification; unknown values count as internal."""
    if isinstance(case_type, CaseType):
        return case_type.folder_label
    if isinstance(case_type, str) and case_type.strip().lower() == CaseType.EXTERNAL.value:
        return CaseType.EXTERNAL.folder_label
    return CaseType.INTERNAL.folder_label


def document_type_folder(document_type: object) -> str:
    """Folder label for a document type code; unknown codes map to the catch-all folder."""
    return DocumentType.parse(document_type).folder_label


class DocumentPlacementPlanner:
    """Computes the four sanitized folder segments for a document."""

    def __init__(self, max_segment_bytes: int = DEFAULT_MAX_SEGMENT_BYTES) -> None:
        self.max_segment_bytes = max_segment_bytes

    def plan_path(
        self,
        customer_code: object,
        case_type: object,
        document_type: object,
        uploader_name: object,
    ) -> list[str]:
        """Return [uploader, customer code, case type folder, document type folder].

        Always four non-empty sanitized segments. Missing inputs become
        generated fallback segments rather than an error.
        """
        return [
            sanitize_segment(uploader_name, self.max_segment_bytes),
            sanitize_segment(customer_code, self.max_segment_bytes),
            sanitize_segment(case_type_folder(case_type), self.max_segment_bytes),
            sanitize_segment(document_type_folder(document_type), self.max_segment_bytes),
        ]


@dataclass(frozen=True)
class StoredPathInfo:
    """Parts of a stored document path, for display."""

    uploader: str
    customer_code: str
    case_type: str
    document_type: str
    file_name: str

    @property
    def breadcrumb(self) -> list[str]:
        return [
            BREADCRUMB_ROOT,
            self.uploader,
            self.customer_code,
            self.case_type,
            self.document_type,
        ]


def describe_stored_path(relative: object) -> StoredPathInfo | None:
    """Split a stored relative path into its layout parts, or None when invalid."""
    if not isinstance(relative, str) or not relative:
        return None
    parts = _SEPARATOR_RE.split(relative)
    if len(parts) < 5:
        return None
    if any(not part or validate_path(part) is None for part in parts):
        return None
    return StoredPathInfo(
        uploader=parts[0],
        customer_code=parts[1],
        case_type=parts[2],
        document_type=parts[3],
        file_name=parts[-1],
    )
