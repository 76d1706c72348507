"""Virtual metadata tables exposing the schema to SQL.

Four reflection tables are synthesized from a Schema on every call. They are
never cached, so a metadata query always reflects the current schema.
"""

from __future__ import annotations

from typing import Any, Dict, List

import polars as pl

from schemadata.core.schemas import Schema

TABLES = "tables"
COLUMNS = "columns"
REFS = "refs"
ENUMS = "enums"

# Column order and dtypes; empty tables keep their shape
VIRTUAL_TABLE_COLUMNS: Dict[str, Dict[str, Any]] = {
    TABLES: {
        "name": pl.Utf8,
        "group_name": pl.Utf8,
        "column_count": pl.Int64,
        "pk_count": pl.Int64,
        "fk_count": pl.Int64,
        "note": pl.Utf8,
        "alias": pl.Utf8,
    },
    COLUMNS: {
        "table_name": pl.Utf8,
        "group_name": pl.Utf8,
        "col_name": pl.Utf8,
        "type": pl.Utf8,
        "pk": pl.Int64,
        "fk": pl.Int64,
        "unique_col": pl.Int64,
        "not_null": pl.Int64,
        "default_val": pl.Utf8,
        "note": pl.Utf8,
    },
    REFS: {
        "from_table": pl.Utf8,
        "from_col": pl.Utf8,
        "to_table": pl.Utf8,
        "to_col": pl.Utf8,
        "rel_type": pl.Utf8,
    },
    ENUMS: {
        "enum_name": pl.Utf8,
        "value": pl.Utf8,
        "note": pl.Utf8,
    },
}

VIRTUAL_TABLE_SCHEMA = """Available virtual SQL tables:

TABLES(name, group_name, column_count, pk_count, fk_count, note, alias)
  - every table in the schema

COLUMNS(table_name, group_name, col_name, type, pk, fk, unique_col, not_null, default_val, note)
  - every column of every table
  - pk, fk, unique_col, not_null are numbers: 1 (true) / 0 (false)

REFS(from_table, from_col, to_table, to_col, rel_type)
  - relationships between tables
  - rel_type: 'one-to-one' | 'one-to-many' | 'many-to-one' | 'many-to-many'

ENUMS(enum_name, value, note)
  - every enum value

TABLES and COLUMNS are reserved words; they resolve to _rsv_tables and
_rsv_columns when quoted or written after FROM/JOIN."""


def _flag(value: bool) -> int:
    return 1 if value else 0


def build_virtual_tables(schema: Schema) -> Dict[str, List[Dict[str, Any]]]:
    """Build the rows of the four reflection tables.

    Returns:
        Mapping of virtual table name to its rows.
    """
    name_by_id = {t.id: t.name for t in schema.tables}

    tables = [
        {
            "name": t.name,
            "group_name": t.group_name or "",
            "column_count": len(t.columns),
            "pk_count": sum(1 for c in t.columns if c.is_primary_key),
            "fk_count": sum(1 for c in t.columns if c.is_foreign_key),
            "note": t.note or "",
            "alias": t.alias or "",
        }
        for t in schema.tables
    ]

    columns = [
        {
            "table_name": t.name,
            "group_name": t.group_name or "",
            "col_name": c.name,
            "type": c.type,
            "pk": _flag(c.is_primary_key),
            "fk": _flag(c.is_foreign_key),
            "unique_col": _flag(c.is_unique),
            "not_null": _flag(c.is_not_null),
            "default_val": c.default_value or "",
            "note": c.note or "",
        }
        for t in schema.tables
        for c in t.columns
    ]

    refs = [
        {
            "from_table": name_by_id.get(r.from_table, r.from_table),
            "from_col": ", ".join(r.from_columns),
            "to_table": name_by_id.get(r.to_table, r.to_table),
            "to_col": ", ".join(r.to_columns),
            "rel_type": r.type,
        }
        for r in schema.refs
    ]

    enums = [
        {"enum_name": e.name, "value": v.name, "note": v.note or ""}
        for e in schema.enums
        for v in e.values
    ]

    return {TABLES: tables, COLUMNS: columns, REFS: refs, ENUMS: enums}


def virtual_frames(schema: Schema) -> Dict[str, pl.DataFrame]:
    """Build the reflection tables as typed polars frames."""
    return {
        name: pl.DataFrame(rows, schema=VIRTUAL_TABLE_COLUMNS[name])
        for name, rows in build_virtual_tables(schema).items()
    }


__all__ = [
    "TABLES",
    "COLUMNS",
    "REFS",
    "ENUMS",
    "VIRTUAL_TABLE_COLUMNS",
    "VIRTUAL_TABLE_SCHEMA",
    "build_virtual_tables",
    "virtual_frames",
]
