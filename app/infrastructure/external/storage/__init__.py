"""Document storage: safe root, folder layout, upload staging and relocation.

All paths resolve through SafeStorageRoot. Uploads are staged under
<root>/temp and moved by DocumentRelocator once the case is known.
"""

from app.infrastructure.external.storage.path_safety import (
    SafeStorageRoot,
    sanitize_segment,
    validate_path,
)
from app.infrastructure.external.storage.placement import (
    DocumentPlacementPlanner,
    StoredPathInfo,
    describe_stored_path,
)
from app.infrastructure.external.storage.relocator import DocumentRelocator
from app.infrastructure.external.storage.staging import StagedFile, UploadStagingArea

__all__ = [
    "DocumentPlacementPlanner",
    "DocumentRelocator",
    "SafeStorageRoot",
    "StagedFile",
    "StoredPathInfo",
    "UploadStagingArea",
    "describe_stored_path",
    "sanitize_segment",
    "validate_path",
]
