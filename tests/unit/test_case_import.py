"""Tests for case upsert reconciliation and the import service (in-memory repository)."""

from dataclasses import replace
from decimal import Decimal

import pytest

from app.application.dtos.case import (
    AggregatedCustomerRecord,
    Applied,
    DebtCaseCreate,
    DebtCaseResult,
    Skipped,
)
from app.application.use_cases.cases import CaseImportService, CaseUpsertReconciler
from app.domain.enums import CaseType
from app.domain.exceptions import SpreadsheetFormatException, UploadRejectedException


class InMemoryDebtCaseRepository:
    """Debt case store keyed by (customer_code, case_type); writes become visible on commit."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.cases: dict[tuple[str, str], DebtCaseResult] = {}
        self.pending: dict[tuple[str, str], DebtCaseResult] = {}
        self.fail_for = fail_for or set()
        self.commits = 0
        self.rollbacks = 0
        self._seq = 0

    async def find_by_customer(self, customer_code: str, case_type: str) -> DebtCaseResult | None:
        if customer_code in self.fail_for:
            raise RuntimeError("database unavailable")
        return self.cases.get((customer_code, case_type))

    async def create(self, data: DebtCaseCreate) -> DebtCaseResult:
        self._seq += 1
        result = DebtCaseResult(
            case_id=f"case{self._seq}",
            customer_code=data.customer_code,
            customer_name=data.customer_name,
            outstanding_debt=data.outstanding_debt,
            case_type=data.case_type,
            status="Mới",
            assigned_employee_code=data.assigned_employee_code,
        )
        self.pending[(data.customer_code, data.case_type)] = result
        return result

    async def update_import_fields(
        self, case_id: str, outstanding_debt: Decimal, assigned_employee_code: str
    ) -> DebtCaseResult | None:
        for key, existing in self.cases.items():
            if existing.case_id == case_id:
                updated = replace(
                    existing,
                    outstanding_debt=outstanding_debt,
                    assigned_employee_code=assigned_employee_code,
                )
                self.pending[key] = updated
                return updated
        return None

    async def commit(self) -> None:
        self.cases.update(self.pending)
        self.pending.clear()
        self.commits += 1

    async def rollback(self) -> None:
        self.pending.clear()
        self.rollbacks += 1


def _record(code: str, debt: str = "1000000", name: str = "Khách", officer: str = "NV001") -> AggregatedCustomerRecord:
    return AggregatedCustomerRecord(code, name, Decimal(debt), officer, "internal")


INTERNAL_ROWS = [
    {"AQCCDFIN": "Nhóm 3", "brcd": "KH002", "dsbsbal": 1000000, "ofcno": "NV001", "custnm": "Nguyễn Văn B"},
    {"AQCCDFIN": "Nhóm 9", "brcd": "KH002", "dsbsbal": 2000000, "ofcno": "NV001", "custnm": "Nguyễn Văn B"},
]


class TestCaseUpsertReconciler:
    """Tests for CaseUpsertReconciler."""

    async def test_creates_new_case(self) -> None:
        repo = InMemoryDebtCaseRepository()
        outcome = await CaseUpsertReconciler(repo).reconcile_one(_record("KH1"), CaseType.INTERNAL)
        assert outcome == Applied("KH1", created=True)
        stored = repo.cases[("KH1", "internal")]
        assert stored.status == "Mới"
        assert stored.outstanding_debt == Decimal("1000000")

    async def test_updates_only_debt_and_officer(self) -> None:
        repo = InMemoryDebtCaseRepository()
        reconciler = CaseUpsertReconciler(repo)
        await reconciler.reconcile_one(_record("KH1", name="Tên cũ"), CaseType.INTERNAL)
        repo.cases[("KH1", "internal")] = replace(repo.cases[("KH1", "internal")], status="Đang xử lý")

        outcome = await reconciler.reconcile_one(
            _record("KH1", debt="500", name="Tên mới", officer="NV002"), CaseType.INTERNAL
        )
        assert outcome == Applied("KH1", created=False)
        stored = repo.cases[("KH1", "internal")]
        assert stored.outstanding_debt == Decimal("500")
        assert stored.assigned_employee_code == "NV002"
        assert stored.customer_name == "Tên cũ"
        assert stored.status == "Đang xử lý"

    async def test_same_customer_in_other_classification_is_separate(self) -> None:
        repo = InMemoryDebtCaseRepository()
        reconciler = CaseUpsertReconciler(repo)
        await reconciler.reconcile_one(_record("KH1"), CaseType.INTERNAL)
        outcome = await reconciler.reconcile_one(_record("KH1"), CaseType.EXTERNAL)
        assert outcome == Applied("KH1", created=True)
        assert len(repo.cases) == 2

    @pytest.mark.parametrize("missing", ["name", "officer"])
    async def test_missing_required_field_skipped(self, missing: str) -> None:
        repo = InMemoryDebtCaseRepository()
        record = _record("KH1", name="" if missing == "name" else "B", officer="" if missing == "officer" else "NV1")
        outcome = await CaseUpsertReconciler(repo).reconcile_one(record, CaseType.INTERNAL)
        assert outcome == Skipped("KH1", "Khách hàng với mã KH1 bị thiếu thông tin Tên hoặc CBTD.")
        assert repo.cases == {}
        assert repo.commits == 0

    async def test_store_failure_rolls_back_and_continues(self) -> None:
        repo = InMemoryDebtCaseRepository(fail_for={"KH2"})
        summary = await CaseUpsertReconciler(repo).reconcile(
            [_record("KH1"), _record("KH2"), _record("KH3")], CaseType.INTERNAL
        )
        assert summary.created == 2
        assert summary.updated == 0
        assert len(summary.errors) == 1
        assert summary.errors[0].startswith("Lỗi xử lý khách hàng KH2:")
        assert repo.rollbacks == 1
        assert set(repo.cases) == {("KH1", "internal"), ("KH3", "internal")}

    async def test_summary_defaults_total_rows_to_record_count(self) -> None:
        summary = await CaseUpsertReconciler(InMemoryDebtCaseRepository()).reconcile(
            {"KH1": _record("KH1")}, CaseType.INTERNAL
        )
        assert summary.total_rows_in_file == 1
        assert summary.processed_customers == 1


class TestCaseImportService:
    """End-to-end imports with a stubbed spreadsheet reader."""

    @staticmethod
    def _service(repo: InMemoryDebtCaseRepository, rows: list[dict]) -> CaseImportService:
        return CaseImportService(repo, spreadsheet_reader=lambda data: rows, max_import_size=1024)

    async def test_internal_import_filters_debt_groups(self) -> None:
        repo = InMemoryDebtCaseRepository()
        summary = await self._service(repo, INTERNAL_ROWS).import_internal(b"xlsx")
        assert summary.total_rows_in_file == 2
        assert summary.processed_customers == 1
        assert summary.created == 1
        assert summary.updated == 0
        assert summary.errors == []
        assert repo.cases[("KH002", "internal")].outstanding_debt == Decimal("1000000.00")

    async def test_reimport_updates_without_duplicates(self) -> None:
        repo = InMemoryDebtCaseRepository()
        service = self._service(repo, INTERNAL_ROWS)
        await service.import_internal(b"xlsx")
        summary = await service.import_internal(b"xlsx")
        assert summary.created == 0
        assert summary.updated == 1
        assert len(repo.cases) == 1
        assert repo.cases[("KH002", "internal")].outstanding_debt == Decimal("1000000.00")

    async def test_row_missing_officer_reported_while_others_succeed(self) -> None:
        rows = [
            {"makh": "KH10", "Ngoaibang": "5.000.000", "cbtd": "NV001", "TenKhachHang": "A"},
            {"makh": "KH11", "Ngoaibang": "7.000.000", "cbtd": "", "TenKhachHang": "B"},
        ]
        repo = InMemoryDebtCaseRepository()
        summary = await self._service(repo, rows).import_external(b"xlsx")
        assert summary.created == 1
        assert summary.updated == 0
        assert summary.errors == ["Khách hàng với mã KH11 bị thiếu thông tin Tên hoặc CBTD."]
        assert ("KH10", "external") in repo.cases

    async def test_oversize_payload_rejected(self) -> None:
        service = self._service(InMemoryDebtCaseRepository(), INTERNAL_ROWS)
        with pytest.raises(UploadRejectedException) as exc_info:
            await service.import_internal(b"x" * 1025)
        assert exc_info.value.details["reason"] == "too_large"

    async def test_reader_errors_propagate(self) -> None:
        def bad_reader(data: bytes) -> list[dict]:
            raise SpreadsheetFormatException("File không đúng định dạng Excel (.xls hoặc .xlsx)")

        service = CaseImportService(InMemoryDebtCaseRepository(), spreadsheet_reader=bad_reader)
        with pytest.raises(SpreadsheetFormatException):
            await service.import_internal(b"not excel")
