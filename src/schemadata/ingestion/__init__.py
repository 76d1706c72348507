"""Spreadsheet ingestion: workbook decoding and header-row extraction.

Public API:
 - load_workbooks, read_workbook, LoadReport
 - extract_tables, parse_sheet_as_table, find_header_row, is_meta_sheet
"""

from .sheets import (
    extract_tables,
    find_header_row,
    is_meta_sheet,
    parse_sheet_as_table,
)
from .workbooks import LoadReport, load_workbooks, read_workbook

__all__ = [
    "extract_tables",
    "find_header_row",
    "is_meta_sheet",
    "parse_sheet_as_table",
    "LoadReport",
    "load_workbooks",
    "read_workbook",
]
