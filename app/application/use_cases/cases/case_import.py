"""Case import: spreadsheet rows -> per-customer aggregates -> upserted cases."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from app.application.dtos.case import (
    AggregatedCustomerRecord,
    Applied,
    DebtCaseCreate,
    ImportSummary,
    Skipped,
)
from app.application.interfaces.repositories import IDebtCaseRepository
from app.application.services.case_aggregator import aggregate
from app.application.services.spreadsheet_rows import row_adapter_for
from app.domain.enums import CaseType
from app.domain.exceptions import UploadRejectedException

logger = logging.getLogger(__name__)

SpreadsheetReader = Callable[[bytes], list[dict[str, Any]]]


class CaseUpsertReconciler:
    """Creates or updates one case per aggregated customer.

    Each customer is its own unit of work: committed on success, rolled back
    and reported on failure. Existing cases only get outstanding debt and
    assigned officer overwritten.
    """

    def __init__(self, case_repo: IDebtCaseRepository) -> None:
        self.case_repo = case_repo

    async def reconcile_one(
        self, record: AggregatedCustomerRecord, case_type: CaseType
    ) -> Applied | Skipped:
        if not record.customer_code or not record.customer_name or not record.assigned_employee_code:
            return Skipped(
                record.customer_code,
                f"Khách hàng với mã {record.customer_code} bị thiếu thông tin Tên hoặc CBTD.",
            )
        try:
            existing = await self.case_repo.find_by_customer(record.customer_code, case_type.value)
            if existing is not None:
                await self.case_repo.update_import_fields(
                    existing.case_id,
                    record.outstanding_debt,
                    record.assigned_employee_code,
                )
                created = False
            else:
                await self.case_repo.create(
                    DebtCaseCreate(
                        customer_code=record.customer_code,
                        customer_name=record.customer_name,
                        outstanding_debt=record.outstanding_debt,
                        case_type=case_type.value,
                        assigned_employee_code=record.assigned_employee_code,
                    )
                )
                created = True
            await self.case_repo.commit()
        except Exception as e:
            await self.case_repo.rollback()
            logger.exception("Import failed for customer %s", record.customer_code)
            return Skipped(record.customer_code, f"Lỗi xử lý khách hàng {record.customer_code}: {e}")
        return Applied(record.customer_code, created)

    async def reconcile(
        self,
        records: Mapping[str, AggregatedCustomerRecord] | Iterable[AggregatedCustomerRecord],
        case_type: CaseType,
        total_rows: int | None = None,
    ) -> ImportSummary:
        """Upsert every record and return the batch summary (never raises for bad rows).

        Args:
            records: Aggregated records (mapping values or an iterable).
            case_type: Classification used for the (customer_code, case_type) key.
            total_rows: Rows read from the file; defaults to the record count.
        """
        items = list(records.values()) if isinstance(records, Mapping) else list(records)
        created = updated = 0
        errors: list[str] = []
        for record in items:
            outcome = await self.reconcile_one(record, case_type)
            if isinstance(outcome, Skipped):
                errors.append(outcome.reason)
            elif outcome.created:
                created += 1
            else:
                updated += 1
        return ImportSummary(
            total_rows_in_file=total_rows if total_rows is not None else len(items),
            processed_customers=len(items),
            created=created,
            updated=updated,
            errors=errors,
        )


class CaseImportService:
    """Runs an internal or external spreadsheet import end to end."""

    def __init__(
        self,
        case_repo: IDebtCaseRepository,
        spreadsheet_reader: SpreadsheetReader,
        max_import_size: int = 20 * 1024 * 1024,
    ) -> None:
        self.reconciler = CaseUpsertReconciler(case_repo)
        self.spreadsheet_reader = spreadsheet_reader
        self.max_import_size = max_import_size

    async def import_internal(self, data: bytes) -> ImportSummary:
        return await self.import_cases(data, CaseType.INTERNAL)

    async def import_external(self, data: bytes) -> ImportSummary:
        return await self.import_cases(data, CaseType.EXTERNAL)

    async def import_cases(self, data: bytes, case_type: CaseType) -> ImportSummary:
        """Parse, aggregate and reconcile.

        Raises:
            UploadRejectedException: Payload larger than max_import_size.
            SpreadsheetFormatException: Payload is not a readable spreadsheet.
        """
        if len(data) > self.max_import_size:
            raise UploadRejectedException(
                f"File vượt quá dung lượng cho phép ({self.max_import_size // (1024 * 1024)}MB)",
                "too_large",
            )
        raw_rows = await asyncio.to_thread(self.spreadsheet_reader, data)
        adapter = row_adapter_for(case_type)
        records = aggregate((adapter.normalize(row) for row in raw_rows), case_type)
        summary = await self.reconciler.reconcile(records, case_type, total_rows=len(raw_rows))
        logger.info(
            "Imported %s cases: rows=%d customers=%d created=%d updated=%d errors=%d",
            case_type.value,
            summary.total_rows_in_file,
            summary.processed_customers,
            summary.created,
            summary.updated,
            len(summary.errors),
        )
        return summary
