"""Infrastructure exceptions for storage operations.

Storage errors extend DebtCaseException so presentation can map them
to HTTP responses consistently.
"""

from app.domain.exceptions import DebtCaseException


class StorageException(DebtCaseException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """File not found in storage (missing or not a regular file)."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File not found: {file_path}",
            "STORAGE_NOT_FOUND",
            {"file_path": file_path},
        )


class StoragePermissionError(StorageException):
    """Path was denied by the safe-root checks."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


class StorageUploadError(StorageException):
    """Writing an incoming file into the staging area failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to store file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class DocumentRelocationError(StorageException):
    """Moving a staged file to its final folder failed.

    stage is one of: validation, planning, directory, move. A planning
    failure is deterministic; directory and move failures may be transient.
    The staged file has already been cleaned up when this is raised.
    """

    STAGES = ("validation", "planning", "directory", "move")

    def __init__(self, stage: str, reason: str, file_path: str | None = None) -> None:
        self.stage = stage
        self.reason = reason
        details = {"stage": stage, "reason": reason}
        if file_path is not None:
            details["file_path"] = file_path
        super().__init__(
            f"Document relocation failed during {stage}: {reason}",
            "DOCUMENT_RELOCATION_ERROR",
            details,
        )
