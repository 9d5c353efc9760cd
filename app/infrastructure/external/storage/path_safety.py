"""Path sanitization and safe-root resolution for document storage.

Every filesystem path the application touches is built from segments passed
through sanitize_segment() and resolved with SafeStorageRoot.resolve_within_root().
Sanitizers never raise: they return a usable value or None (deny).
"""

from __future__ import annotations

import logging
import re
import secrets
import unicodedata
from pathlib import Path

from app.infrastructure.exceptions import StoragePermissionError
from app.shared.telemetry.logging import SECURITY_LOGGER_NAME

logger = logging.getLogger(__name__)
security_logger = logging.getLogger(SECURITY_LOGGER_NAME)

DEFAULT_MAX_SEGMENT_BYTES = 180

_RESERVED_CHARS_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
_DOTS_RE = re.compile(r"\.{2,}")
_WHITESPACE_RE = re.compile(r"\s+")
_SEPARATOR_RE = re.compile(r"[\\/]")

_TRAVERSAL_RES = (
    re.compile(r"\.\./"),
    re.compile(r"\.\.\\"),
    re.compile(r"\.\.$"),
)
_ABSOLUTE_RE = re.compile(r"^(?:[A-Za-z]:[\\/]|/)")
_DRIVE_PREFIX_RE = re.compile(r"^[A-Za-z]:")
_ABSOLUTE_FORBIDDEN_RE = re.compile(r'[<>"|?*]')
_RELATIVE_FORBIDDEN_RE = re.compile(r'[<>:"|?*/\\]')

RESERVED_DEVICE_NAMES = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)}
)


def fallback_segment() -> str:
    """Generated placeholder used when a segment cannot be salvaged."""
    return f"safe_{secrets.token_hex(4)}"


def is_reserved_device_name(segment: str) -> bool:
    """True when the part before the first dot is a reserved device name (CON, lpt1.txt, ...)."""
    stem = segment.split(".", 1)[0].strip().upper()
    return stem in RESERVED_DEVICE_NAMES


def truncate_utf8(value: str, max_bytes: int) -> str:
    """Drop trailing characters until the UTF-8 encoding fits in max_bytes.

    Works per character so a multi-byte sequence is never split.
    """
    while value and len(value.encode("utf-8")) > max_bytes:
        value = value[:-1]
    return value


def sanitize_segment(raw: object, max_bytes: int = DEFAULT_MAX_SEGMENT_BYTES) -> str:
    """Turn arbitrary input into a single filesystem-safe path segment.

    Never raises. Empty, non-string, reserved or fully stripped input yields a
    generated ``safe_<hex>`` segment.

    Args:
        raw: Display name, customer code, folder label or file base name.
        max_bytes: Upper bound for the UTF-8 encoded length.

    Returns:
        Non-empty segment without separators, drive markers, control
        characters, ``..`` runs or leading dots.
    """
    if not isinstance(raw, str) or not raw:
        return fallback_segment()

    value = unicodedata.normalize("NFC", raw)
    if ".." in value or _SEPARATOR_RE.search(value):
        security_logger.warning("Path segment contained traversal characters: %r", raw)
    value = _RESERVED_CHARS_RE.sub("_", value)
    value = _DOTS_RE.sub("_", value)
    value = value.lstrip(".")
    value = _WHITESPACE_RE.sub(" ", value)
    value = value.strip()
    if not value:
        return fallback_segment()
    if is_reserved_device_name(value):
        security_logger.warning("Reserved device name used as path segment: %r", raw)
        return fallback_segment()

    value = truncate_utf8(value, max_bytes).rstrip()
    if not value:
        return fallback_segment()
    return value


def validate_path(candidate: object, allow_absolute: bool = False) -> str | None:
    """Check a path candidate and return it trimmed, or None to deny.

    Rejects null bytes, ``../``, ``..\\`` and a trailing ``..``. Relative
    candidates may not contain separators, drive colons or the characters
    ``< > " | ? *``. With allow_absolute, the candidate must start with a drive
    letter plus separator or with a separator, and may not contain those
    characters after the drive prefix.
    """
    if not isinstance(candidate, str) or not candidate:
        return None
    if "\x00" in candidate:
        security_logger.warning("Rejected path containing a null byte: %r", candidate)
        return None

    value = candidate.strip()
    if not value:
        return None
    for pattern in _TRAVERSAL_RES:
        if pattern.search(value):
            security_logger.warning("Rejected path traversal pattern: %r", candidate)
            return None

    if allow_absolute:
        if not _ABSOLUTE_RE.match(value):
            logger.debug("Rejected non-absolute path where absolute was required: %r", candidate)
            return None
        if _ABSOLUTE_FORBIDDEN_RE.search(_DRIVE_PREFIX_RE.sub("", value, count=1)):
            security_logger.warning("Rejected absolute path with forbidden characters: %r", candidate)
            return None
        return value

    if _RELATIVE_FORBIDDEN_RE.search(value):
        security_logger.warning("Rejected relative path with forbidden characters: %r", candidate)
        return None
    return value


class SafeStorageRoot:
    """The single base directory all document files live under.

    The root is resolved to an absolute path once. Stored paths are kept
    relative to it with forward slashes so the root can move.
    """

    def __init__(
        self,
        root: str | Path,
        max_segment_bytes: int = DEFAULT_MAX_SEGMENT_BYTES,
    ) -> None:
        self.root = Path(root).resolve()
        self.max_segment_bytes = max_segment_bytes

    def ensure_exists(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def sanitize(self, raw: object) -> str:
        """sanitize_segment() with this root's byte limit."""
        return sanitize_segment(raw, self.max_segment_bytes)

    def contains(self, path: str | Path) -> bool:
        """True when path, once resolved, is the root or below it."""
        try:
            Path(path).resolve().relative_to(self.root)
        except (ValueError, OSError):
            return False
        return True

    def resolve_within_root(self, relative: object) -> Path | None:
        """Resolve a root-relative path, or return None to deny.

        Every segment (split on ``/`` and ``\\``) must pass validate_path().
        Empty segments and absolute input are rejected. The joined path is
        resolved (following symlinks) and must still be inside the root.
        """
        if not isinstance(relative, str) or not relative:
            return None
        segments = _SEPARATOR_RE.split(relative)
        for segment in segments:
            if segment in ("", ".") or validate_path(segment, False) is None:
                logger.debug("Rejected stored path segment %r in %r", segment, relative)
                return None
        try:
            resolved = self.root.joinpath(*segments).resolve()
        except (OSError, RuntimeError) as e:
            security_logger.warning("Path resolution error for %r: %s", relative, e)
            return None
        try:
            resolved.relative_to(self.root)
        except ValueError:
            security_logger.warning(
                "Path escaped safe root: %r -> %s", relative, resolved
            )
            return None
        return resolved

    def resolve_segments(self, segments: list[str]) -> Path | None:
        """resolve_within_root() for an already split segment list."""
        if not segments:
            return None
        return self.resolve_within_root("/".join(segments))

    def relative_path(self, absolute: str | Path) -> str | None:
        """Root-relative, forward-slash form of an absolute path inside the root."""
        try:
            rel = Path(absolute).resolve().relative_to(self.root)
        except (ValueError, OSError):
            security_logger.warning("Refused to relativize path outside safe root: %s", absolute)
            return None
        return rel.as_posix()

    def resolve_stored(self, relative: str) -> Path:
        """Resolve a stored relative path for a file operation.

        Raises:
            StoragePermissionError: If the path is denied by resolve_within_root().
        """
        resolved = self.resolve_within_root(relative)
        if resolved is None:
            raise StoragePermissionError(relative, "path_validation")
        return resolved
