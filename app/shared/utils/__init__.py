"""Shared utilities: datetime and identifier helpers."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import new_record_id

__all__ = [
    "ensure_utc",
    "new_record_id",
    "utc_now",
]
