"""Decode an uploaded workbook into header-keyed row dicts.

The payload's file signature is checked before parsing: OLE2 compound
documents go to xlrd, ZIP containers to openpyxl. Anything else is refused
with SpreadsheetFormatException instead of a parser error.
"""

from __future__ import annotations

import logging
import struct
import zipfile
from collections.abc import Iterable, Sequence
from enum import Enum
from io import BytesIO
from typing import Any
from xml.etree import ElementTree

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.compdoc import CompDocError

from app.domain.exceptions import SpreadsheetFormatException

logger = logging.getLogger(__name__)

OLE2_SIGNATURE = bytes.fromhex("D0CF11E0A1B11AE1")
ZIP_SIGNATURE = b"PK\x03\x04"


class SpreadsheetKind(str, Enum):
    XLS = "xls"
    XLSX = "xlsx"


def detect_spreadsheet_kind(data: bytes) -> SpreadsheetKind | None:
    """Return the container kind from the leading bytes, or None when unknown."""
    if data.startswith(OLE2_SIGNATURE):
        return SpreadsheetKind.XLS
    if data.startswith(ZIP_SIGNATURE):
        return SpreadsheetKind.XLSX
    return None


def read_spreadsheet_rows(data: bytes) -> list[dict[str, Any]]:
    """Read the first sheet; the first row is the header row.

    Blank rows are dropped. Cells under a blank header are ignored; for a
    repeated header the first column wins.

    Raises:
        SpreadsheetFormatException: Not a spreadsheet, unreadable, or no data rows.
    """
    if not data:
        raise SpreadsheetFormatException("File rỗng, không phải file Excel hợp lệ")
    kind = detect_spreadsheet_kind(data)
    if kind is None:
        logger.info("Import refused: payload signature is not OLE2 or ZIP")
        raise SpreadsheetFormatException(
            "File không đúng định dạng Excel (.xls hoặc .xlsx)"
        )

    if kind is SpreadsheetKind.XLSX:
        raw_rows = _read_xlsx(data)
    else:
        raw_rows = _read_xls(data)

    rows = _rows_to_dicts(raw_rows)
    if not rows:
        raise SpreadsheetFormatException("File Excel không có dữ liệu")
    return rows


# Raised by openpyxl while opening the package or, in read-only mode, while
# streaming sheet XML. SyntaxError covers lxml's XMLSyntaxError.
_XLSX_ERRORS = (
    InvalidFileException,
    zipfile.BadZipFile,
    ElementTree.ParseError,
    SyntaxError,
    KeyError,
    IndexError,
    TypeError,
    ValueError,
    OSError,
)
_XLS_ERRORS = (
    xlrd.XLRDError,
    CompDocError,
    struct.error,
    IndexError,
    TypeError,
    ValueError,
    OSError,
)


def _read_xlsx(data: bytes) -> list[Sequence[Any]]:
    try:
        workbook = openpyxl.load_workbook(
            BytesIO(data),
            read_only=True,
            data_only=True,
            keep_links=False,
        )
    except _XLSX_ERRORS as e:
        raise SpreadsheetFormatException(f"Không đọc được file Excel: {e}") from e
    try:
        if not workbook.worksheets:
            raise SpreadsheetFormatException("File Excel không có sheet nào")
        sheet = workbook.worksheets[0]
        return [tuple(row) for row in sheet.iter_rows(values_only=True)]
    except _XLSX_ERRORS as e:
        raise SpreadsheetFormatException(f"Không đọc được file Excel: {e}") from e
    finally:
        workbook.close()


def _read_xls(data: bytes) -> list[Sequence[Any]]:
    try:
        book = xlrd.open_workbook(file_contents=data, on_demand=True)
    except _XLS_ERRORS as e:
        raise SpreadsheetFormatException(f"Không đọc được file Excel: {e}") from e
    try:
        if book.nsheets == 0:
            raise SpreadsheetFormatException("File Excel không có sheet nào")
        sheet = book.sheet_by_index(0)
        rows: list[Sequence[Any]] = []
        for index in range(sheet.nrows):
            rows.append(
                tuple(
                    None if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK) else cell.value
                    for cell in sheet.row(index)
                )
            )
        return rows
    except _XLS_ERRORS as e:
        raise SpreadsheetFormatException(f"Không đọc được file Excel: {e}") from e
    finally:
        book.release_resources()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _rows_to_dicts(raw_rows: Iterable[Sequence[Any]]) -> list[dict[str, Any]]:
    iterator = iter(raw_rows)
    header: list[str | None] | None = None
    for row in iterator:
        if all(_is_blank(cell) for cell in row):
            continue
        header = [None if _is_blank(cell) else str(cell).strip() for cell in row]
        break
    if header is None:
        return []

    result: list[dict[str, Any]] = []
    for row in iterator:
        if all(_is_blank(cell) for cell in row):
            continue
        record: dict[str, Any] = {}
        for name, value in zip(header, row):
            if name is None or name in record:
                continue
            record[name] = value
        result.append(record)
    return result
