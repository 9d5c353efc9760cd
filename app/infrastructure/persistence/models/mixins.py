"""SQLAlchemy mixins for common model patterns.

Provides CreatedAtMixin and TimestampMixin (server defaults, timezone-aware).
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func


class CreatedAtMixin:
    """Mixin for an immutable created_at."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at; updated_at also moves on journal activity."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
            index=True,
        )
