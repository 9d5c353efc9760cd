"""Spreadsheet decoding for case imports (.xlsx via openpyxl, legacy .xls via xlrd)."""

from app.infrastructure.external.spreadsheet.reader import (
    SpreadsheetKind,
    detect_spreadsheet_kind,
    read_spreadsheet_rows,
)

__all__ = [
    "SpreadsheetKind",
    "detect_spreadsheet_kind",
    "read_spreadsheet_rows",
]
