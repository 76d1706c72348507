"""Query result data structures.

- StatementResult: outcome of one statement of a multi-statement query
- QueryResult: outcome of a query call (single result or per-statement list)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

Value = Union[str, int, float, bool, None]
Row = Dict[str, Value]


@dataclass
class StatementResult:
    """Result of a single statement.

    Attributes:
        sql: The statement text as written, used for labeling.
        table_name: First table after FROM, best effort.
        columns: Output column names in order.
        rows: Output rows.
        error: Engine error message, when the statement failed.
    """

    sql: str
    table_name: str
    columns: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "sql": self.sql,
            "tableName": self.table_name,
            "columns": self.columns,
            "rows": self.rows,
            "rowCount": self.row_count,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class QueryResult:
    """Result of a query call.

    For multi-statement input ``columns`` and ``rows`` are empty,
    ``multi_results`` holds one entry per statement and ``row_count`` is the
    sum of their row counts.

    Examples:
        >>> result = execute_data_sql("SELECT * FROM character", tables)
        >>> result.error is None
        True
        >>> result.row_count
        3
    """

    columns: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)
    row_count: int = 0
    error: Optional[str] = None
    duration: Optional[float] = None  # milliseconds
    multi_results: Optional[List[StatementResult]] = None

    @classmethod
    def failure(cls, error: str, duration: Optional[float] = None) -> "QueryResult":
        return cls(error=error, duration=duration)

    @property
    def ok(self) -> bool:
        """True when neither the query nor any of its statements failed."""
        if self.error is not None:
            return False
        return all(r.error is None for r in self.multi_results or [])

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase field names of the wire contract."""
        out: Dict[str, Any] = {
            "columns": self.columns,
            "rows": self.rows,
            "rowCount": self.row_count,
        }
        if self.error is not None:
            out["error"] = self.error
        if self.duration is not None:
            out["duration"] = self.duration
        if self.multi_results is not None:
            out["multiResults"] = [r.to_dict() for r in self.multi_results]
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False, default=str)


__all__ = ["Value", "Row", "StatementResult", "QueryResult"]
