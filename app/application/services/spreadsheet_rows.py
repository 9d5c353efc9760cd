"""Cell normalizers and row-shape adapters for case import spreadsheets.

The internal (core banking) and external extracts name the same concepts
with different column headers. Each has its own adapter; both produce a
NormalizedRow for the aggregator. Normalizers are total: they never raise.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from app.domain.enums import CaseType

_DIGITS_RE = re.compile(r"\d+")
_CURRENCY_RE = re.compile(r"(?i)(vnđ|vnd|đồng|đ|₫|\$|usd)")
_CENTS = Decimal("0.01")
ZERO = Decimal("0")


def normalize_debt_classification(value: Any) -> int:
    """Debt group number from a numeric cell or the first digit run in text ("Nhóm 3" -> 3).

    Blank, non-matching, oversized or unsupported values give 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, Decimal):
        return int(value) if value.is_finite() else 0
    if isinstance(value, str):
        match = _DIGITS_RE.search(value)
        if not match:
            return 0
        try:
            return int(match.group(0))
        except ValueError:
            # Digit run longer than the int conversion limit
            return 0
    return 0


def normalize_outstanding_debt(value: Any) -> Decimal:
    """Non-negative amount rounded to cents; unparsable, negative, non-finite or oversized values give 0.

    Strings may carry thousands separators ("1,000,000", "1 000 000",
    "1.000.000"), a decimal comma ("1.000.000,50") and a currency marker
    ("2.500.000 VNĐ").
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return ZERO
        amount = Decimal(str(value))
    elif isinstance(value, str):
        amount = _parse_amount_text(value)
    else:
        return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    try:
        return amount.quantize(_CENTS)
    except InvalidOperation:
        # More digits than the decimal context precision
        return ZERO


def _parse_amount_text(text: str) -> Decimal:
    cleaned = _CURRENCY_RE.sub("", text)
    cleaned = re.sub(r"\s", "", cleaned)
    if "," in cleaned and "." in cleaned:
        # The right-most separator is the decimal point
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        head, _, tail = cleaned.rpartition(",")
        if cleaned.count(",") == 1 and len(tail) != 3:
            cleaned = f"{head}.{tail}"
        else:
            cleaned = cleaned.replace(",", "")
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")
    if not cleaned:
        return ZERO
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return ZERO


def normalize_code(value: Any) -> str:
    """Customer or employee code as trimmed text; integral floats lose the '.0'."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        return str(int(value))
    return str(value).strip()


def normalize_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class NormalizedRow:
    """Canonical import row, independent of the extract's column names."""

    customer_code: str
    customer_name: str
    outstanding_debt: Decimal
    assigned_employee_code: str
    debt_classification: int = 0


class InternalExtractRow:
    """Core banking extract: AQCCDFIN, brcd, dsbsbal, ofcno, custnm."""

    case_type = CaseType.INTERNAL

    DEBT_GROUP = "AQCCDFIN"
    CUSTOMER_CODE = "brcd"
    OUTSTANDING_DEBT = "dsbsbal"
    EMPLOYEE_CODE = "ofcno"
    CUSTOMER_NAME = "custnm"

    @classmethod
    def normalize(cls, row: Mapping[str, Any]) -> NormalizedRow:
        return NormalizedRow(
            customer_code=normalize_code(row.get(cls.CUSTOMER_CODE)),
            customer_name=normalize_text(row.get(cls.CUSTOMER_NAME)),
            outstanding_debt=normalize_outstanding_debt(row.get(cls.OUTSTANDING_DEBT)),
            assigned_employee_code=normalize_code(row.get(cls.EMPLOYEE_CODE)),
            debt_classification=normalize_debt_classification(row.get(cls.DEBT_GROUP)),
        )


class ExternalExtractRow:
    """Off-balance-sheet extract: makh, Ngoaibang, cbtd, TenKhachHang. Has no debt group column."""

    case_type = CaseType.EXTERNAL

    CUSTOMER_CODE = "makh"
    OUTSTANDING_DEBT = "Ngoaibang"
    EMPLOYEE_CODE = "cbtd"
    CUSTOMER_NAME = "TenKhachHang"

    @classmethod
    def normalize(cls, row: Mapping[str, Any]) -> NormalizedRow:
        return NormalizedRow(
            customer_code=normalize_code(row.get(cls.CUSTOMER_CODE)),
            customer_name=normalize_text(row.get(cls.CUSTOMER_NAME)),
            outstanding_debt=normalize_outstanding_debt(row.get(cls.OUTSTANDING_DEBT)),
            assigned_employee_code=normalize_code(row.get(cls.EMPLOYEE_CODE)),
        )


def row_adapter_for(case_type: CaseType) -> type[InternalExtractRow] | type[ExternalExtractRow]:
    if case_type is CaseType.EXTERNAL:
        return ExternalExtractRow
    return InternalExtractRow
