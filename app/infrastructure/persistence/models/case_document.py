"""Case document ORM model. file_path is relative to the storage root."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.domain.enums import DocumentType
from app.infrastructure.persistence.database import Base
from app.shared.utils.generators import new_record_id


class CaseDocument(Base):
    """Case document entity. Table: case_documents."""

    __tablename__ = "case_documents"

    document_id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=new_record_id
    )
    case_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("debt_cases.case_id", ondelete="CASCADE"), nullable=False, index=True
    )
    original_filename: Mapped[str] = mapped_column(String(500), nullable=False)
    file_path: Mapped[str] = mapped_column(String(1000), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    document_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default=DocumentType.OTHER.value
    )
    uploaded_by_employee_code: Mapped[str] = mapped_column(String(50), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
