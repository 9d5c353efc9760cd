"""Debt case ORM model."""

from decimal import Decimal

from sqlalchemy import Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import CaseStatus, CaseType
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import TimestampMixin
from app.shared.utils.generators import new_record_id


class DebtCase(TimestampMixin, Base):
    """Debt case entity. Table: debt_cases. Unique per (customer_code, case_type)."""

    __tablename__ = "debt_cases"

    case_id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_record_id)
    customer_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    outstanding_debt: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False, default=Decimal("0")
    )
    case_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CaseType.INTERNAL.value
    )
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=CaseStatus.NEW.value, index=True
    )
    # Not a foreign key: imports may reference officers not yet in users
    assigned_employee_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("customer_code", "case_type", name="uq_debt_case_customer_type"),
    )
