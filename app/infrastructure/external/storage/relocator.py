"""Moves staged uploads into their final case folder."""

from __future__ import annotations

import asyncio
import errno
import logging
import shutil
from pathlib import Path
from typing import Protocol

import aiofiles.os

from app.infrastructure.exceptions import DocumentRelocationError
from app.infrastructure.external.storage.path_safety import SafeStorageRoot, validate_path
from app.infrastructure.external.storage.placement import DocumentPlacementPlanner
from app.infrastructure.external.storage.staging import StagedFile
from app.shared.telemetry.logging import SECURITY_LOGGER_NAME

logger = logging.getLogger(__name__)
security_logger = logging.getLogger(SECURITY_LOGGER_NAME)


class PlacedCase(Protocol):
    customer_code: str
    case_type: str


class Uploader(Protocol):
    employee_code: str
    fullname: str | None


def uploader_folder_name(uploader: Uploader) -> str:
    """Display name of the uploader, falling back to the employee code."""
    fullname = (uploader.fullname or "").strip()
    return fullname or uploader.employee_code


class DocumentRelocator:
    """Relocates a StagedFile to <root>/<uploader>/<customer>/<case type>/<doc type>/.

    Failures after validation remove the staged file before raising
    DocumentRelocationError with the failing stage. Nothing is retried.
    """

    def __init__(self, root: SafeStorageRoot, planner: DocumentPlacementPlanner) -> None:
        self.root = root
        self.planner = planner

    async def relocate(
        self,
        staged: StagedFile,
        debt_case: PlacedCase,
        uploader: Uploader,
        document_type: str,
    ) -> Path:
        """Move the staged file and return its final absolute path.

        Raises:
            DocumentRelocationError: stage is validation, planning, directory or move.
        """
        source = staged.path
        if not self.root.contains(source):
            security_logger.warning("Relocation refused: staged path outside safe root: %s", source)
            raise DocumentRelocationError("validation", "staged file is outside the storage root")
        if not await aiofiles.os.path.isfile(source):
            raise DocumentRelocationError(
                "validation", "staged file no longer exists", staged.stored_name
            )

        try:
            segments = self.planner.plan_path(
                debt_case.customer_code,
                debt_case.case_type,
                document_type,
                uploader_folder_name(uploader),
            )
        except (TypeError, ValueError) as e:
            await self._cleanup(source)
            raise DocumentRelocationError("planning", str(e), staged.stored_name) from e

        if len(segments) != 4 or any(
            not segment.strip() or validate_path(segment) is None for segment in segments
        ):
            await self._cleanup(source)
            raise DocumentRelocationError(
                "planning", "target folder segments are invalid", staged.stored_name
            )

        target_dir = self.root.resolve_segments(segments)
        if target_dir is None:
            await self._cleanup(source)
            raise DocumentRelocationError(
                "planning", "target folder resolves outside the storage root", staged.stored_name
            )

        try:
            await aiofiles.os.makedirs(target_dir, exist_ok=True)
        except OSError as e:
            await self._cleanup(source)
            raise DocumentRelocationError("directory", str(e), staged.stored_name) from e

        destination = target_dir / source.name
        try:
            await self._move(source, destination)
        except OSError as e:
            await self._cleanup(source)
            raise DocumentRelocationError("move", str(e), staged.stored_name) from e

        logger.info("Relocated %s to %s", staged.stored_name, self.root.relative_path(destination))
        return destination

    async def _move(self, source: Path, destination: Path) -> None:
        try:
            await aiofiles.os.rename(source, destination)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise
            # Staging folder on another device: copy then delete
            await asyncio.to_thread(shutil.move, str(source), str(destination))

    async def _cleanup(self, source: Path) -> None:
        try:
            await aiofiles.os.remove(source)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove staged file %s after failed relocation: %s", source, e)
