"""Tests for the document folder layout."""

import pytest

from app.domain.enums import CaseType, DocumentType
from app.infrastructure.external.storage.placement import (
    BREADCRUMB_ROOT,
    DocumentPlacementPlanner,
    case_type_folder,
    describe_stored_path,
    document_type_folder,
)


class TestPlanPath:
    """Tests for DocumentPlacementPlanner.plan_path."""

    def test_enforcement_document_for_internal_case(self) -> None:
        planner = DocumentPlacementPlanner()
        assert planner.plan_path("KH001", "internal", "enforcement", "Nguyễn Văn A") == [
            "Nguyễn Văn A",
            "KH001",
            "Nội bảng",
            "Tài liệu Thi hành án",
        ]

    def test_external_case_folder(self) -> None:
        segments = DocumentPlacementPlanner().plan_path("KH9", CaseType.EXTERNAL, "court", "NV001")
        assert segments[2] == "Ngoại bảng"
        assert segments[3] == "Tài liệu Tòa án"

    def test_unknown_document_type_goes_to_catch_all(self) -> None:
        segments = DocumentPlacementPlanner().plan_path("KH1", "internal", "invoice", "NV001")
        assert segments[3] == "Tài liệu khác"

    def test_hostile_inputs_are_sanitized(self) -> None:
        segments = DocumentPlacementPlanner().plan_path("../KH1", "internal", None, "a/b")
        assert len(segments) == 4
        for segment in segments:
            assert segment
            assert "/" not in segment
            assert ".." not in segment

    def test_missing_inputs_get_fallback_segments(self) -> None:
        segments = DocumentPlacementPlanner().plan_path(None, None, None, "")
        assert segments[0].startswith("safe_")
        assert segments[1].startswith("safe_")
        assert segments[2] == "Nội bảng"
        assert segments[3] == "Tài liệu khác"

    def test_segment_byte_limit_applied(self) -> None:
        segments = DocumentPlacementPlanner(max_segment_bytes=20).plan_path(
            "KH" + "9" * 50, "internal", "other", "Nguyễn Văn A"
        )
        assert all(len(s.encode("utf-8")) <= 20 for s in segments)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("internal", "Nội bảng"),
        ("EXTERNAL", "Ngoại bảng"),
        (CaseType.EXTERNAL, "Ngoại bảng"),
        ("unknown", "Nội bảng"),
        (None, "Nội bảng"),
    ],
)
def test_case_type_folder(value: object, expected: str) -> None:
    assert case_type_folder(value) == expected


def test_document_type_folder_for_every_type() -> None:
    folders = {document_type_folder(t.value) for t in DocumentType}
    assert len(folders) == len(DocumentType)


class TestDescribeStoredPath:
    """Tests for describe_stored_path."""

    def test_breadcrumb(self) -> None:
        info = describe_stored_path("Nguyễn Văn A/KH001/Nội bảng/Tài liệu Thi hành án/hd_1_ab.pdf")
        assert info is not None
        assert info.file_name == "hd_1_ab.pdf"
        assert info.breadcrumb == [
            BREADCRUMB_ROOT,
            "Nguyễn Văn A",
            "KH001",
            "Nội bảng",
            "Tài liệu Thi hành án",
        ]

    @pytest.mark.parametrize(
        "relative",
        ["temp/file.pdf", "a/b/c/d", "a/../c/d/e.pdf", "a//c/d/e.pdf", "", None],
    )
    def test_invalid_paths(self, relative: object) -> None:
        assert describe_stored_path(relative) is None
