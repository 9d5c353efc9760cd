"""Folds normalized import rows into one record per customer."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from app.application.dtos.case import AggregatedCustomerRecord
from app.application.services.spreadsheet_rows import NormalizedRow
from app.domain.enums import CaseType

logger = logging.getLogger(__name__)

# Substandard, doubtful and loss debt groups. Only these become internal cases.
ACTIONABLE_DEBT_GROUPS = frozenset({3, 4, 5})


def aggregate(
    rows: Iterable[NormalizedRow], case_type: CaseType
) -> dict[str, AggregatedCustomerRecord]:
    """Sum debt per customer code in a single pass, in file order.

    Internal imports keep only rows whose debt group is in ACTIONABLE_DEBT_GROUPS;
    external imports keep every row. Rows without a customer code are skipped.
    Name and officer come from the first row seen for a customer, even if blank.

    Returns:
        Insertion-ordered mapping customer_code -> AggregatedCustomerRecord.
    """
    totals: dict[str, AggregatedCustomerRecord] = {}
    filtered = 0
    for row in rows:
        if case_type is CaseType.INTERNAL and row.debt_classification not in ACTIONABLE_DEBT_GROUPS:
            filtered += 1
            continue
        if not row.customer_code:
            continue
        current = totals.get(row.customer_code)
        if current is None:
            totals[row.customer_code] = AggregatedCustomerRecord(
                customer_code=row.customer_code,
                customer_name=row.customer_name,
                outstanding_debt=row.outstanding_debt,
                assigned_employee_code=row.assigned_employee_code,
                case_type=case_type.value,
            )
        else:
            totals[row.customer_code] = AggregatedCustomerRecord(
                customer_code=current.customer_code,
                customer_name=current.customer_name,
                outstanding_debt=current.outstanding_debt + row.outstanding_debt,
                assigned_employee_code=current.assigned_employee_code,
                case_type=current.case_type,
            )
    if filtered:
        logger.debug("Skipped %d rows outside debt groups %s", filtered, sorted(ACTIONABLE_DEBT_GROUPS))
    return totals
