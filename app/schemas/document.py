"""Document API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, computed_field

from app.infrastructure.external.storage.placement import describe_stored_path


class DocumentResponse(BaseModel):
    """Case document metadata. file_path is relative to the storage root."""

    model_config = ConfigDict(from_attributes=True)

    document_id: str
    case_id: str
    original_filename: str
    file_path: str
    mime_type: str
    file_size: int
    document_type: str
    uploaded_by_employee_code: str
    uploaded_at: datetime | None = None

    @computed_field
    @property
    def breadcrumb(self) -> list[str] | None:
        info = describe_stored_path(self.file_path)
        return info.breadcrumb if info else None
