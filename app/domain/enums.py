"""Domain enumerations for debt cases.

Enums represent fixed sets of domain values: case classification, case
status, document type and employee role. Status values are the Vietnamese
labels stored in the database.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class CaseType(_ValuesMixin, str, Enum):
    """Case classification. A customer code is unique per classification."""

    INTERNAL = "internal"
    EXTERNAL = "external"

    @property
    def folder_label(self) -> str:
        """Human-readable folder name used in the storage layout."""
        return _CASE_TYPE_FOLDERS[self]


_CASE_TYPE_FOLDERS = {
    CaseType.INTERNAL: "Nội bảng",
    CaseType.EXTERNAL: "Ngoại bảng",
}


class CaseStatus(_ValuesMixin, str, Enum):
    """Collection workflow status of a debt case."""

    NEW = "Mới"
    PROCESSING = "Đang xử lý"
    BEING_FOLLOWED_UP = "Đang đôn đốc"
    BEING_SUED = "Đang khởi kiện"
    AWAITING_JUDGMENT_EFFECT = "Chờ hiệu lực án"
    BEING_EXECUTED = "Đang thi hành án"
    PROACTIVELY_SETTLED = "Chủ động XLTS"
    DEBT_SOLD = "Bán nợ"
    AMC_HIRED = "Thuê AMC XLN"
    COMPLETED = "Hoàn thành"


class DocumentType(_ValuesMixin, str, Enum):
    """Document classification chosen by the uploader.

    Each member maps to a fixed folder name in the storage layout and to a
    short label used in the case journal.
    """

    COURT = "court"
    ENFORCEMENT = "enforcement"
    NOTIFICATION = "notification"
    PROACTIVE = "proactive"
    COLLATERAL = "collateral"
    PROCESSED_COLLATERAL = "processed_collateral"
    OTHER = "other"

    @classmethod
    def parse(cls, value: object) -> "DocumentType":
        """Return the member for value; unknown or missing codes map to OTHER."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.OTHER
        return cls.OTHER

    @property
    def folder_label(self) -> str:
        return _DOCUMENT_TYPE_FOLDERS[self]

    @property
    def journal_label(self) -> str:
        return _DOCUMENT_TYPE_LABELS[self]


_DOCUMENT_TYPE_FOLDERS = {
    DocumentType.COURT: "Tài liệu Tòa án",
    DocumentType.ENFORCEMENT: "Tài liệu Thi hành án",
    DocumentType.NOTIFICATION: "Tài liệu Bán nợ",
    DocumentType.PROACTIVE: "Tài liệu Chủ động xử lý tài sản",
    DocumentType.COLLATERAL: "Tài sản đảm bảo",
    DocumentType.PROCESSED_COLLATERAL: "Tài liệu tài sản đã xử lý",
    DocumentType.OTHER: "Tài liệu khác",
}

_DOCUMENT_TYPE_LABELS = {
    DocumentType.COURT: "Tòa án",
    DocumentType.ENFORCEMENT: "Thi hành án",
    DocumentType.NOTIFICATION: "Bán nợ",
    DocumentType.PROACTIVE: "Chủ động xử lý tài sản",
    DocumentType.COLLATERAL: "Tài sản đảm bảo",
    DocumentType.PROCESSED_COLLATERAL: "Tài sản đã xử lý",
    DocumentType.OTHER: "Tài liệu khác",
}


class UserRole(_ValuesMixin, str, Enum):
    """Employee role carried in the identity token."""

    EMPLOYEE = "employee"
    DEPUTY_MANAGER = "deputy_manager"
    MANAGER = "manager"
    DEPUTY_DIRECTOR = "deputy_director"
    DIRECTOR = "director"
    ADMINISTRATOR = "administrator"


MANAGER_ROLES = frozenset({UserRole.MANAGER, UserRole.DEPUTY_MANAGER})
DIRECTOR_ROLES = frozenset({UserRole.DIRECTOR, UserRole.DEPUTY_DIRECTOR})
