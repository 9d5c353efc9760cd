"""API v1 dependencies: auth, storage, and service composition."""

from app.api.v1.dependencies.auth import get_current_user, require_roles
from app.api.v1.dependencies.case import (
    get_case_import_service,
    get_case_service,
    get_dashboard_service,
)
from app.api.v1.dependencies.document import (
    get_document_query_service,
    get_document_upload_service,
)
from app.api.v1.dependencies.storage import (
    get_document_relocator,
    get_safe_storage_root,
    get_upload_staging_area,
)

__all__ = [
    "get_case_import_service",
    "get_case_service",
    "get_current_user",
    "get_dashboard_service",
    "get_document_query_service",
    "get_document_relocator",
    "get_document_upload_service",
    "get_safe_storage_root",
    "get_upload_staging_area",
    "require_roles",
]
