"""Table registration for the embedded SQL engine.

Every call builds a fresh ``polars.SQLContext``: the registrations of one
query never leak into the next. Each table is registered under every name a
caller is likely to use:

- reserved names (see ``reserved.py``) only under their internal alias
- all other names as written, lower-cased and upper-cased
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

import polars as pl

from schemadata.core.schemas import Schema
from schemadata.core.tables import TableData, resolve_display_name
from .metadata import virtual_frames
from .reserved import internal_alias, is_reserved

logger = logging.getLogger(__name__)


@dataclass
class TableCatalog:
    """A short-lived namespace of tables for one execution.

    Attributes:
        context: The engine context holding the registered frames.
        aliases: Reserved table name → internal alias, for query rewriting.
        names: Every name registered in ``context``.
    """

    context: pl.SQLContext
    aliases: Dict[str, str] = field(default_factory=dict)
    names: List[str] = field(default_factory=list)

    def register(self, name: str, frame: pl.DataFrame) -> None:
        """Register ``frame`` under ``name`` and its case variants."""
        if is_reserved(name):
            alias = internal_alias(name)
            self.aliases[name] = alias
            variants = [alias]
        else:
            variants = list(dict.fromkeys([name, name.lower(), name.upper()]))
        for variant in variants:
            self.context.register(variant, frame)
            if variant not in self.names:
                self.names.append(variant)
        logger.debug("Registered table %s as %s (%d rows)", name, variants, frame.height)


def _column_series(name: str, values: Sequence[Optional[str]]) -> pl.Series:
    """Build a text column; cells missing from a row become null."""
    return pl.Series(name, list(values), dtype=pl.Utf8)


def table_to_frame(table: TableData) -> pl.DataFrame:
    """Convert TableData to a frame with lower-cased column names."""
    rows = [{k.lower(): v for k, v in row.items()} for row in table.rows]
    columns: List[str] = list(dict.fromkeys(h.lower() for h in table.headers))
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return pl.DataFrame([_column_series(c, [row.get(c) for row in rows]) for c in columns])


def register_data_tables(
    table_data: Mapping[str, TableData], schema: Optional[Schema] = None
) -> TableCatalog:
    """Build a catalog holding every loaded data table.

    Args:
        table_data: Tables keyed by extraction source key.
        schema: Optional schema; table keys matching a schema table name
            (case-insensitively) are registered under the declared spelling.

    Returns:
        A fresh TableCatalog.
    """
    proper_names = schema.table_names() if schema else None
    catalog = TableCatalog(context=pl.SQLContext())
    for key, table in table_data.items():
        name = resolve_display_name(key, proper_names)
        catalog.register(name, table_to_frame(table))
    return catalog


def register_metadata_tables(schema: Schema) -> TableCatalog:
    """Build a catalog holding only the four virtual metadata tables."""
    catalog = TableCatalog(context=pl.SQLContext())
    for name, frame in virtual_frames(schema).items():
        catalog.register(name, frame)
    return catalog


__all__ = [
    "TableCatalog",
    "table_to_frame",
    "register_data_tables",
    "register_metadata_tables",
]
