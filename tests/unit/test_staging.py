"""Tests for the upload staging area."""

import asyncio
import re
from pathlib import Path

import pytest

from app.domain.exceptions import UploadRejectedException
from app.infrastructure.exceptions import StorageUploadError
from app.infrastructure.external.storage.path_safety import SafeStorageRoot
from app.infrastructure.external.storage.staging import (
    UploadStagingArea,
    normalize_mime_type,
    split_original_filename,
)


class AsyncBytesStream:
    """Minimal async stream over bytes, read in caller-sized chunks."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    async def read(self, size: int = -1) -> bytes:
        if size < 0:
            size = len(self.data) - self.offset
        chunk = self.data[self.offset : self.offset + size]
        self.offset += len(chunk)
        return chunk


@pytest.fixture
def root(tmp_path: Path) -> SafeStorageRoot:
    return SafeStorageRoot(tmp_path)


@pytest.fixture
def staging(root: SafeStorageRoot) -> UploadStagingArea:
    return UploadStagingArea(root, staging_dir_name="temp", max_upload_size=1024)


async def test_stage_writes_file_under_temp(staging: UploadStagingArea, root: SafeStorageRoot) -> None:
    staged = await staging.stage(AsyncBytesStream(b"%PDF-1.4 test"), "Hợp đồng vay.pdf", "application/pdf")
    assert staged.path.parent == root.root / "temp"
    assert staged.path.read_bytes() == b"%PDF-1.4 test"
    assert staged.size == len(b"%PDF-1.4 test")
    assert staged.original_filename == "Hợp đồng vay.pdf"
    assert staged.content_type == "application/pdf"
    assert re.fullmatch(r"Hợp đồng vay_\d{13}_[0-9a-f]{16}\.pdf", staged.stored_name)


async def test_stage_reads_large_streams_in_chunks(root: SafeStorageRoot) -> None:
    staging = UploadStagingArea(root, max_upload_size=200 * 1024)
    data = b"x" * (150 * 1024)
    staged = await staging.stage(AsyncBytesStream(data), "big.txt", "text/plain")
    assert staged.size == len(data)
    assert staged.path.stat().st_size == len(data)


async def test_stage_file_at_limit_accepted(staging: UploadStagingArea) -> None:
    staged = await staging.stage(AsyncBytesStream(b"a" * 1024), "limit.txt", "text/plain")
    assert staged.size == 1024


async def test_oversize_rejected_and_removed(staging: UploadStagingArea, root: SafeStorageRoot) -> None:
    with pytest.raises(UploadRejectedException) as exc_info:
        await staging.stage(AsyncBytesStream(b"a" * 1025), "big.txt", "text/plain")
    assert exc_info.value.details["reason"] == "too_large"
    assert list((root.root / "temp").iterdir()) == []


async def test_mime_type_not_allowed(staging: UploadStagingArea, root: SafeStorageRoot) -> None:
    with pytest.raises(UploadRejectedException) as exc_info:
        await staging.stage(AsyncBytesStream(b"MZ"), "setup.pdf", "application/x-msdownload")
    assert exc_info.value.details["reason"] == "mime_type"
    assert not (root.root / "temp").exists()


@pytest.mark.parametrize("filename", ["run.exe", "RUN.EXE", "run.exe.", "script.py", "a.pdf.js", "x.Ps1"])
async def test_executable_extension_rejected_even_with_allowed_mime(
    staging: UploadStagingArea, filename: str
) -> None:
    with pytest.raises(UploadRejectedException) as exc_info:
        await staging.stage(AsyncBytesStream(b"data"), filename, "application/pdf")
    assert exc_info.value.details["reason"] == "extension"


@pytest.mark.parametrize("filename", ["", "   "])
async def test_missing_filename_rejected(staging: UploadStagingArea, filename: str) -> None:
    with pytest.raises(UploadRejectedException) as exc_info:
        await staging.stage(AsyncBytesStream(b"data"), filename, "application/pdf")
    assert exc_info.value.details["reason"] == "missing_filename"


async def test_mime_parameters_ignored(staging: UploadStagingArea) -> None:
    staged = await staging.stage(AsyncBytesStream(b"hello"), "note.txt", "Text/Plain; charset=utf-8")
    assert staged.content_type == "text/plain"


async def test_discard_removes_staged_file(staging: UploadStagingArea) -> None:
    staged = await staging.stage(AsyncBytesStream(b"hello"), "note.txt", "text/plain")
    await staging.discard(staged)
    assert not staged.path.exists()


class TestGenerateStoredName:
    """Tests for UploadStagingArea.generate_stored_name."""

    def test_unique(self, staging: UploadStagingArea) -> None:
        names = {staging.generate_stored_name("scan.png") for _ in range(50)}
        assert len(names) == 50

    def test_extension_lowercased(self, staging: UploadStagingArea) -> None:
        assert staging.generate_stored_name("SCAN.PNG").endswith(".png")

    def test_odd_extension_dropped(self, staging: UploadStagingArea) -> None:
        name = staging.generate_stored_name("weird.ab cd")
        assert re.fullmatch(r"weird_\d+_[0-9a-f]{16}", name)

    def test_client_path_components_dropped(self, staging: UploadStagingArea) -> None:
        name = staging.generate_stored_name("..\\..\\windows\\evil.pdf")
        assert name.startswith("evil_")
        assert "/" not in name and "\\" not in name

    def test_base_name_sanitized(self, staging: UploadStagingArea) -> None:
        assert staging.generate_stored_name("CON.pdf").startswith("safe_")


def test_normalize_mime_type() -> None:
    assert normalize_mime_type(None) == ""
    assert normalize_mime_type(" IMAGE/PNG ") == "image/png"


def test_split_original_filename() -> None:
    assert split_original_filename("dir/report.final.pdf") == ("report.final", ".pdf")
    assert split_original_filename(".bashrc") == (".bashrc", "")


class FailingStream:
    """Returns one chunk, then fails the way a dropped client connection does."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        self.calls = 0

    async def read(self, size: int = -1) -> bytes:
        self.calls += 1
        if self.calls == 1:
            return b"x" * 100
        raise self.error


@pytest.mark.parametrize("error", [RuntimeError("connection reset"), asyncio.CancelledError()])
async def test_interrupted_stream_leaves_no_partial_file(
    staging: UploadStagingArea, root: SafeStorageRoot, error: BaseException
) -> None:
    with pytest.raises(type(error)):
        await staging.stage(FailingStream(error), "a.pdf", "application/pdf")
    assert list((root.root / "temp").iterdir()) == []


async def test_write_failure_wrapped_and_cleaned_up(
    staging: UploadStagingArea, root: SafeStorageRoot
) -> None:
    with pytest.raises(StorageUploadError):
        await staging.stage(FailingStream(OSError("disk full")), "a.pdf", "application/pdf")
    assert list((root.root / "temp").iterdir()) == []
