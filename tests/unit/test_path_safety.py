"""Tests for segment sanitization, path validation and the safe storage root."""

import itertools
import unicodedata
from pathlib import Path

import pytest

from app.infrastructure.exceptions import StoragePermissionError
from app.infrastructure.external.storage.path_safety import (
    SafeStorageRoot,
    is_reserved_device_name,
    sanitize_segment,
    truncate_utf8,
    validate_path,
)


class TestSanitizeSegment:
    """Tests for sanitize_segment."""

    def test_plain_vietnamese_name_kept(self) -> None:
        assert sanitize_segment("Nguyễn Văn A") == "Nguyễn Văn A"

    def test_decomposed_input_normalized_to_nfc(self) -> None:
        decomposed = unicodedata.normalize("NFD", "Tài liệu Thi hành án")
        assert sanitize_segment(decomposed) == unicodedata.normalize("NFC", "Tài liệu Thi hành án")

    def test_traversal_neutralized(self) -> None:
        result = sanitize_segment("../../etc/passwd")
        assert "/" not in result
        assert ".." not in result
        assert result.endswith("etc_passwd")

    def test_backslash_and_drive_replaced(self) -> None:
        result = sanitize_segment("C:\\Windows\\System32")
        assert "\\" not in result
        assert ":" not in result

    def test_reserved_characters_replaced(self) -> None:
        assert sanitize_segment('a<b>c:d"e|f?g*h') == "a_b_c_d_e_f_g_h"

    def test_control_characters_replaced(self) -> None:
        assert sanitize_segment("bad\x00name\x1f") == "bad_name_"

    def test_leading_dots_removed(self) -> None:
        assert sanitize_segment(".hidden") == "hidden"

    def test_dot_runs_collapsed(self) -> None:
        assert sanitize_segment("a...b") == "a_b"

    def test_whitespace_collapsed_and_trimmed(self) -> None:
        assert sanitize_segment("  KH   001\t ") == "KH 001"

    @pytest.mark.parametrize("reserved", ["CON", "nul", "com1", "LPT9", "aux.txt"])
    def test_reserved_device_names_replaced(self, reserved: str) -> None:
        result = sanitize_segment(reserved)
        assert result.startswith("safe_")
        assert len(result) == len("safe_") + 8

    @pytest.mark.parametrize("raw", ["", None, 42, ".", "   "])
    def test_empty_or_unusable_input_gives_fallback(self, raw: object) -> None:
        assert sanitize_segment(raw).startswith("safe_")

    def test_truncated_by_utf8_bytes_without_splitting(self) -> None:
        result = sanitize_segment("ễ" * 100, max_bytes=180)
        assert len(result.encode("utf-8")) <= 180
        assert result == "ễ" * 60

    def test_idempotent(self) -> None:
        for raw in ["Nguyễn Văn A", "../../x", "a<b>", "  spaced  out ", "ễ" * 100]:
            once = sanitize_segment(raw)
            assert sanitize_segment(once) == once


def test_truncate_utf8_short_value_unchanged() -> None:
    assert truncate_utf8("abc", 10) == "abc"


def test_is_reserved_device_name_ignores_extension_and_case() -> None:
    assert is_reserved_device_name("Prn.pdf")
    assert not is_reserved_device_name("console")


class TestValidatePath:
    """Tests for validate_path."""

    def test_plain_segment_allowed(self) -> None:
        assert validate_path("report.pdf") == "report.pdf"

    def test_trimmed(self) -> None:
        assert validate_path("  report.pdf ") == "report.pdf"

    @pytest.mark.parametrize("candidate", ["../secret", "..\\secret", "a/..", ".."])
    def test_traversal_rejected(self, candidate: str) -> None:
        assert validate_path(candidate) is None

    def test_null_byte_rejected(self) -> None:
        assert validate_path("a\x00b") is None

    @pytest.mark.parametrize("candidate", ["a/b", "a\\b", "C:x", "a|b", "a?b", "a*b", 'a"b'])
    def test_relative_forbidden_characters_rejected(self, candidate: str) -> None:
        assert validate_path(candidate) is None

    @pytest.mark.parametrize("candidate", ["", None, 7])
    def test_non_string_or_empty_rejected(self, candidate: object) -> None:
        assert validate_path(candidate) is None

    def test_absolute_allowed_when_requested(self) -> None:
        assert validate_path("/var/data/files", allow_absolute=True) == "/var/data/files"
        assert validate_path("D:\\data\\files", allow_absolute=True) == "D:\\data\\files"

    def test_absolute_requires_root(self) -> None:
        assert validate_path("data/files", allow_absolute=True) is None

    def test_absolute_forbidden_characters_rejected(self) -> None:
        assert validate_path("/var/da|ta", allow_absolute=True) is None


class TestSafeStorageRoot:
    """Tests for SafeStorageRoot resolution."""

    def test_root_is_absolute(self, tmp_path: Path) -> None:
        root = SafeStorageRoot(tmp_path)
        assert root.root.is_absolute()
        assert root.root == tmp_path.resolve()

    def test_resolve_within_root(self, tmp_path: Path) -> None:
        root = SafeStorageRoot(tmp_path)
        assert root.resolve_within_root("NV001/KH001/file.pdf") == (
            tmp_path.resolve() / "NV001" / "KH001" / "file.pdf"
        )

    def test_backslash_separators_accepted(self, tmp_path: Path) -> None:
        root = SafeStorageRoot(tmp_path)
        assert root.resolve_within_root("NV001\\KH001") == tmp_path.resolve() / "NV001" / "KH001"

    @pytest.mark.parametrize(
        "relative",
        ["../outside", "a/../../outside", "/etc/passwd", "a//b", "./a", "a/./b", "", "a/b\x00"],
    )
    def test_denied(self, tmp_path: Path, relative: str) -> None:
        assert SafeStorageRoot(tmp_path).resolve_within_root(relative) is None

    def test_symlink_escape_denied(self, tmp_path: Path) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        root_dir = tmp_path / "root"
        root_dir.mkdir()
        (root_dir / "link").symlink_to(outside, target_is_directory=True)
        root = SafeStorageRoot(root_dir)
        assert root.resolve_within_root("link/secret.txt") is None

    def test_resolve_segments(self, tmp_path: Path) -> None:
        root = SafeStorageRoot(tmp_path)
        assert root.resolve_segments(["a", "b"]) == tmp_path.resolve() / "a" / "b"
        assert root.resolve_segments([]) is None
        assert root.resolve_segments(["a", ".."]) is None

    def test_relative_path(self, tmp_path: Path) -> None:
        root = SafeStorageRoot(tmp_path)
        assert root.relative_path(tmp_path / "a" / "b.pdf") == "a/b.pdf"
        assert root.relative_path(tmp_path.parent) is None

    def test_contains(self, tmp_path: Path) -> None:
        root = SafeStorageRoot(tmp_path / "root")
        assert root.contains(tmp_path / "root" / "x")
        assert not root.contains(tmp_path / "other")

    def test_resolve_stored_raises_when_denied(self, tmp_path: Path) -> None:
        root = SafeStorageRoot(tmp_path)
        with pytest.raises(StoragePermissionError) as exc_info:
            root.resolve_stored("../etc/passwd")
        assert exc_info.value.details["operation"] == "path_validation"

    def test_ensure_exists_creates_root(self, tmp_path: Path) -> None:
        root = SafeStorageRoot(tmp_path / "nested" / "storage")
        root.ensure_exists()
        assert root.root.is_dir()


TRAVERSAL_TOKENS = ["../", "..\\", "\x00"]
RELATIVE_ONLY_TOKENS = ["C:\\", "d:/", "C:"]


def _combine(tokens: list[str], bases: list[str]) -> list[str]:
    """Each token as prefix, as suffix and inserted mid-way into each base, singly and paired."""
    candidates = []
    for token, base in itertools.product(tokens, bases):
        middle = len(base) // 2
        candidates += [token + base, base + token, base[:middle] + token + base[middle:]]
    for first, second in itertools.product(tokens, repeat=2):
        candidates.append(first + bases[0] + second)
    return candidates


RELATIVE_ADVERSARIAL = _combine(TRAVERSAL_TOKENS + RELATIVE_ONLY_TOKENS, ["report.pdf", "KH001", "x"]) + [
    base + trailer for base in ["report.pdf", "KH001"] for trailer in ["/..", "\\.."]
]
ABSOLUTE_ADVERSARIAL = _combine(TRAVERSAL_TOKENS, ["/var/data/files", "C:\\data\\files"]) + [
    base + trailer for base in ["/var/data", "D:\\data"] for trailer in ["/..", "\\.."]
]


@pytest.mark.parametrize("candidate", RELATIVE_ADVERSARIAL, ids=repr)
def test_generated_traversal_rejected_for_relative_paths(candidate: str) -> None:
    assert validate_path(candidate) is None


@pytest.mark.parametrize("candidate", ABSOLUTE_ADVERSARIAL, ids=repr)
def test_generated_traversal_rejected_for_absolute_paths(candidate: str) -> None:
    assert validate_path(candidate, allow_absolute=True) is None


@pytest.mark.parametrize("candidate", RELATIVE_ADVERSARIAL, ids=repr)
def test_generated_traversal_never_resolves(tmp_path: Path, candidate: str) -> None:
    assert SafeStorageRoot(tmp_path).resolve_within_root(candidate) is None


@pytest.mark.parametrize(
    "segments",
    list(itertools.product(["NV001", "..", "Nội bảng", "C:", "a\x00b"], repeat=3)),
    ids=repr,
)
def test_resolved_paths_stay_inside_root(tmp_path: Path, segments: tuple[str, ...]) -> None:
    root = SafeStorageRoot(tmp_path)
    resolved = root.resolve_within_root("/".join(segments))
    assert resolved is None or resolved.is_relative_to(root.root)
