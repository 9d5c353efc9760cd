"""Employee ORM model. Identity is issued elsewhere; rows give a case officer's department and branch."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import UserRole
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import TimestampMixin


class Employee(TimestampMixin, Base):
    """Employee entity. Table: users. Keyed by employee_code."""

    __tablename__ = "users"

    employee_code: Mapped[str] = mapped_column(String(50), primary_key=True)
    username: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    fullname: Mapped[str] = mapped_column(String(255), nullable=False)
    branch_code: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    # KHCN, KHDN, KH&QLRR, BGĐ, IT
    dept: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    role: Mapped[str] = mapped_column(
        String(50), nullable=False, default=UserRole.EMPLOYEE.value
    )
