"""Case journal ORM model."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CreatedAtMixin
from app.shared.utils.generators import new_record_id


class CaseUpdate(CreatedAtMixin, Base):
    """Journal entry on a case. Table: case_updates."""

    __tablename__ = "case_updates"

    update_id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_record_id)
    case_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("debt_cases.case_id", ondelete="CASCADE"), nullable=False, index=True
    )
    update_content: Mapped[str] = mapped_column(Text, nullable=False)
    created_by_employee_code: Mapped[str] = mapped_column(String(50), nullable=False)
