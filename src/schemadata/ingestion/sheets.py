"""Sheet-to-table extraction.

A decoded sheet is a list of raw cell rows. The header row is picked by a
heuristic over the first few rows, and every non-empty row below it becomes
one TableData row keyed by header text. Values are always trimmed strings.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from schemadata.core.schemas import Schema
from schemadata.core.tables import TableData
from schemadata.core.utils import cell_to_str, is_numeric

logger = logging.getLogger(__name__)

# Definition sheets that describe the schema rather than hold data
SKIP_SHEETS = frozenset({"define", "tabledefine", "enum", "tablegroup"})
META_SHEET_MARKER = "#"

HEADER_SCAN_ROWS = 5

RawRow = Sequence[Any]


def is_meta_sheet(name: str) -> bool:
    """True for sheets that hold definitions rather than data."""
    if META_SHEET_MARKER in name:
        return True
    return name.lower() in SKIP_SHEETS


def _row_cells(row: Optional[RawRow]) -> List[str]:
    return [cell_to_str(v) for v in (row or [])]


def find_header_row(raw: Sequence[RawRow], known_columns: Optional[Set[str]] = None) -> int:
    """Pick the header row among the first ``HEADER_SCAN_ROWS`` rows.

    With known column names, a row scores the number of its non-empty
    lower-cased cells found in ``known_columns``. Without them, it scores the
    number of non-numeric non-empty cells, since headers are textual. The
    best score wins; ties go to the earliest row. Empty rows never win.

    Args:
        raw: Decoded sheet rows.
        known_columns: Lower-cased column names of the matching schema table.

    Returns:
        0-based index of the header row (0 when nothing scores).
    """
    best_idx = 0
    best_score = -1
    for r in range(min(HEADER_SCAN_ROWS, len(raw))):
        cells = [c.lower() for c in _row_cells(raw[r]) if c]
        if not cells:
            continue
        if known_columns:
            score = sum(1 for c in cells if c in known_columns)
        else:
            score = sum(1 for c in cells if not is_numeric(c))
        if score > best_score:
            best_score = score
            best_idx = r
    return best_idx


def parse_sheet_as_table(
    raw: Sequence[RawRow], sheet_name: str, known_columns: Optional[Set[str]] = None
) -> Optional[TableData]:
    """Build TableData from a decoded sheet.

    Returns:
        None when the sheet has fewer than 2 rows, the header row has no
        non-empty cell, or no data row remains below the header.
    """
    if len(raw) < 2:
        return None

    header_idx = find_header_row(raw, known_columns)
    header_row = _row_cells(raw[header_idx])
    if not any(header_row):
        return None

    rows: List[Dict[str, str]] = []
    source_rows: List[int] = []
    for i in range(header_idx + 1, len(raw)):
        cells = _row_cells(raw[i])
        if not any(cells):
            continue
        record: Dict[str, str] = {}
        for j, header in enumerate(header_row):
            if not header:
                continue
            record[header] = cells[j] if j < len(cells) else ""
        rows.append(record)
        source_rows.append(i + 1)

    if not rows:
        return None
    headers = list(dict.fromkeys(h for h in header_row if h))
    return TableData(name=sheet_name, headers=headers, rows=rows, source_rows=source_rows)


def known_columns_by_table(schema: Optional[Schema]) -> Dict[str, Set[str]]:
    """Map lower-cased table name to its lower-cased column names."""
    if schema is None:
        return {}
    return {t.name.lower(): {c.name.lower() for c in t.columns} for t in schema.tables}


def extract_tables(
    sheets: Mapping[str, Sequence[RawRow]], schema: Optional[Schema] = None
) -> Tuple[List[TableData], int]:
    """Extract TableData from every data sheet of a workbook.

    Args:
        sheets: Sheet name → decoded rows, in workbook order.
        schema: Optional schema supplying known column names per sheet.

    Returns:
        Tuple of (extracted tables, number of sheets skipped). Definition
        sheets are not counted as skipped.
    """
    known = known_columns_by_table(schema)
    tables: List[TableData] = []
    skipped = 0
    for sheet_name, raw in sheets.items():
        if is_meta_sheet(sheet_name):
            logger.debug("Skipping definition sheet %s", sheet_name)
            continue
        table = parse_sheet_as_table(raw, sheet_name, known.get(sheet_name.lower()))
        if table is None:
            skipped += 1
            logger.debug("No table extracted from sheet %s", sheet_name)
            continue
        tables.append(table)
    return tables, skipped


__all__ = [
    "SKIP_SHEETS",
    "META_SHEET_MARKER",
    "HEADER_SCAN_ROWS",
    "is_meta_sheet",
    "find_header_row",
    "parse_sheet_as_table",
    "known_columns_by_table",
    "extract_tables",
]
