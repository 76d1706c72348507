"""Tabular data extracted from spreadsheet sheets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional


@dataclass
class TableData:
    """Rows extracted from one sheet.

    Attributes:
        name: Source sheet name (not necessarily a schema table name).
        headers: Ordered, non-empty header texts.
        rows: One mapping per data row, keyed by header text. Values are
            trimmed strings; sparse rows may omit headers.
        source_rows: 1-based sheet row number of each entry in ``rows``.
            When empty, rows are assumed to start right below a header on
            sheet row 1.
    """

    name: str
    headers: List[str]
    rows: List[Dict[str, str]]
    source_rows: List[int] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def sheet_row(self, index: int) -> int:
        """Return the 1-based sheet row of the row at ``index``."""
        if index < len(self.source_rows):
            return self.source_rows[index]
        return index + 2


TableDataMap = Mapping[str, TableData]


def resolve_display_name(key: str, proper_names: Optional[Mapping[str, str]]) -> str:
    """Resolve a data key against schema table names, case-insensitively.

    Falls back to the raw key when no schema table matches.
    """
    if not proper_names:
        return key
    return proper_names.get(key.lower(), key)


__all__ = ["TableData", "TableDataMap", "resolve_display_name"]
