"""Plain-text description of loaded tables for query-writing callers."""

from __future__ import annotations

import json
from typing import List, Mapping, Optional

from schemadata.core.schemas import Schema
from schemadata.core.tables import TableData, resolve_display_name
from .reserved import internal_alias, is_reserved

MAX_SAMPLE_COLUMNS = 6
MAX_REFS = 40


def describe_data_tables(
    table_data: Mapping[str, TableData], schema: Optional[Schema] = None
) -> str:
    """Summarize queryable tables: name, row count, columns, a sample row,
    and the schema relationships usable as JOIN hints.

    Reserved table names are listed with the alias a query must use.
    """
    proper_names = schema.table_names() if schema else None
    lines: List[str] = ["Available tables (loaded data):"]

    for key, table in table_data.items():
        name = resolve_display_name(key, proper_names)
        label = f"{name} -> query as {internal_alias(name)}" if is_reserved(name) else name
        lines.append("")
        lines.append(f"{label} ({table.row_count} rows)")
        lines.append(f"  columns: {', '.join(h.lower() for h in table.headers)}")
        if table.rows:
            sample = table.rows[0]
            shown = table.headers[:MAX_SAMPLE_COLUMNS]
            sample_str = ", ".join(
                f"{h.lower()}={json.dumps(sample.get(h, ''), ensure_ascii=False)}" for h in shown
            )
            more = " ..." if len(table.headers) > MAX_SAMPLE_COLUMNS else ""
            lines.append(f"  sample: {sample_str}{more}")

    if schema and schema.refs:
        name_by_id = {t.id: t.name for t in schema.tables}
        lines.append("")
        lines.append("Relationships (JOIN hints):")
        for ref in schema.refs[:MAX_REFS]:
            src = name_by_id.get(ref.from_table, ref.from_table)
            dst = name_by_id.get(ref.to_table, ref.to_table)
            lines.append(
                f"  {src}.{','.join(ref.from_columns)} -> "
                f"{dst}.{','.join(ref.to_columns)} ({ref.type})"
            )
        if len(schema.refs) > MAX_REFS:
            lines.append(f"  ... and {len(schema.refs) - MAX_REFS} more")

    return "\n".join(lines)


__all__ = ["describe_data_tables"]
