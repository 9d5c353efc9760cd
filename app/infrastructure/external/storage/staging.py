"""Upload staging: incoming files land in <safe root>/temp before relocation."""

from __future__ import annotations

import logging
import os
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import aiofiles
import aiofiles.os

from app.domain.exceptions import UploadRejectedException
from app.infrastructure.exceptions import StoragePermissionError, StorageUploadError
from app.infrastructure.external.storage.path_safety import SafeStorageRoot
from app.shared.telemetry.logging import SECURITY_LOGGER_NAME

logger = logging.getLogger(__name__)
security_logger = logging.getLogger(SECURITY_LOGGER_NAME)

CHUNK_SIZE = 64 * 1024  # 64KB

ALLOWED_MIME_TYPES = frozenset(
    {
        # Images
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/bmp",
        # Documents
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        # Text
        "text/plain",
        "text/csv",
        # Video
        "video/mp4",
        "video/avi",
        "video/mov",
        "video/wmv",
        "video/webm",
        # Audio
        "audio/mp3",
        "audio/wav",
        "audio/ogg",
        "audio/mpeg",
        # Archives
        "application/zip",
        "application/x-rar-compressed",
        "application/x-7z-compressed",
    }
)

# Checked independently of the declared MIME type
DENIED_EXTENSIONS = frozenset(
    {
        ".exe", ".com", ".bat", ".cmd", ".scr", ".pif", ".cpl", ".msi", ".msp",
        ".dll", ".sys", ".drv", ".ocx", ".vb", ".vbs", ".vbe", ".js", ".jse",
        ".wsf", ".wsh", ".hta", ".jar", ".ps1", ".psm1", ".reg", ".lnk",
        ".sh", ".bash", ".csh", ".ksh", ".run", ".bin", ".app", ".gadget",
        ".php", ".phtml", ".asp", ".aspx", ".jsp", ".cgi", ".pl", ".py",
    }
)

_KEEPABLE_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]{1,10}")
_SEPARATOR_RE = re.compile(r"[\\/]")


class AsyncReadable(Protocol):
    """Byte stream delivered by the upload transport (e.g. FastAPI UploadFile)."""

    async def read(self, size: int = -1) -> bytes: ...


@dataclass(frozen=True)
class StagedFile:
    """A file written to the staging folder and not yet relocated.

    stored_name is the generated on-disk name; original_filename is kept
    verbatim for display and download headers.
    """

    path: Path
    stored_name: str
    original_filename: str
    content_type: str
    size: int


def normalize_mime_type(content_type: str | None) -> str:
    """Lowercase MIME type without parameters ('text/plain; charset=utf-8' -> 'text/plain')."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def split_original_filename(original_filename: str) -> tuple[str, str]:
    """Return (base name, extension) of the last path component of an uploaded name."""
    name = _SEPARATOR_RE.split(original_filename)[-1]
    base, ext = os.path.splitext(name)
    if not base and ext:
        # ".bashrc" style names have no extension
        base, ext = ext, ""
    return base, ext


class UploadStagingArea:
    """Receives incoming files into <safe root>/<staging dir>.

    Rejects files whose declared MIME type is not allow-listed or whose
    extension is executable-like, and files larger than max_upload_size.
    On-disk names are ``<sanitized base>_<ms timestamp>_<16 hex><.ext>``.
    """

    def __init__(
        self,
        root: SafeStorageRoot,
        staging_dir_name: str = "temp",
        max_upload_size: int = 50 * 1024 * 1024,
    ) -> None:
        self.root = root
        self.staging_dir_name = staging_dir_name
        self.max_upload_size = max_upload_size

    @property
    def staging_dir(self) -> Path:
        staging = self.root.resolve_within_root(self.staging_dir_name)
        if staging is None:
            raise StoragePermissionError(self.staging_dir_name, "staging")
        return staging

    def check_acceptable(self, original_filename: object, content_type: str | None) -> str:
        """Validate name, MIME type and extension; return the normalized MIME type.

        Raises:
            UploadRejectedException: With reason missing_filename, mime_type or extension.
        """
        if not isinstance(original_filename, str) or not original_filename.strip():
            raise UploadRejectedException(
                "Uploaded file has no filename", "missing_filename"
            )
        mime = normalize_mime_type(content_type)
        if mime not in ALLOWED_MIME_TYPES:
            security_logger.warning(
                "Upload rejected: MIME type %r not allowed (file %r)", mime, original_filename
            )
            raise UploadRejectedException(
                f"Loại file không được hỗ trợ: {mime or 'unknown'}",
                "mime_type",
                original_filename,
            )
        # Windows drops trailing dots and spaces, so "run.exe." is still .exe
        _, ext = split_original_filename(original_filename.rstrip(". "))
        if ext.lower() in DENIED_EXTENSIONS:
            security_logger.warning(
                "Upload rejected: executable extension %r (file %r, MIME %r)",
                ext,
                original_filename,
                mime,
            )
            raise UploadRejectedException(
                f"Phần mở rộng file không được phép: {ext}",
                "extension",
                original_filename,
            )
        return mime

    def generate_stored_name(self, original_filename: str) -> str:
        base, ext = split_original_filename(original_filename)
        sanitized = self.root.sanitize(base)
        timestamp = int(time.time() * 1000)
        suffix = secrets.token_hex(8)
        extension = ext.lower() if _KEEPABLE_EXTENSION_RE.fullmatch(ext) else ""
        return f"{sanitized}_{timestamp}_{suffix}{extension}"

    async def stage(
        self,
        stream: AsyncReadable,
        original_filename: str,
        content_type: str | None,
    ) -> StagedFile:
        """Write the incoming stream into the staging folder.

        Args:
            stream: Source with an async read(size) method.
            original_filename: Name as supplied by the client (kept verbatim).
            content_type: Declared MIME type.

        Returns:
            StagedFile describing the written file.

        Raises:
            UploadRejectedException: Filename, MIME type, extension or size refused.
            StorageUploadError: Writing the file failed.
        """
        mime = self.check_acceptable(original_filename, content_type)
        staging_dir = self.staging_dir
        await aiofiles.os.makedirs(staging_dir, exist_ok=True)

        stored_name = self.generate_stored_name(original_filename)
        target = staging_dir / stored_name
        if not self.root.contains(target):
            raise StoragePermissionError(stored_name, "staging")

        size = 0
        kept = False
        try:
            async with aiofiles.open(target, "wb") as f:
                while True:
                    chunk = await stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_upload_size:
                        break
                    await f.write(chunk)
            kept = size <= self.max_upload_size
        except OSError as e:
            raise StorageUploadError(stored_name, str(e)) from e
        finally:
            # A partial file never outlives an unsuccessful upload
            if not kept:
                await self._remove_quietly(target)

        if size > self.max_upload_size:
            raise UploadRejectedException(
                f"File vượt quá dung lượng cho phép ({self.max_upload_size // (1024 * 1024)}MB)",
                "too_large",
                original_filename,
            )

        logger.info("Staged upload %r as %s (%d bytes)", original_filename, stored_name, size)
        return StagedFile(
            path=target,
            stored_name=stored_name,
            original_filename=original_filename,
            content_type=mime,
            size=size,
        )

    async def discard(self, staged: StagedFile) -> None:
        """Best-effort removal of a staged file that will not be relocated."""
        if self.root.contains(staged.path):
            await self._remove_quietly(staged.path)

    async def _remove_quietly(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove staged file %s: %s", path, e)
