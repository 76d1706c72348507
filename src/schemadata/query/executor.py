"""Query execution against loaded data or against the schema itself.

Two entry points share one pipeline:

- ``execute_sql``: metadata mode, only the virtual reflection tables
- ``execute_data_sql``: data mode, the loaded TableData

Pipeline per call: strip comments, split statements, then for each statement
normalize identifiers, remap reserved table names and run it on a freshly
registered ``polars.SQLContext``. Engine errors never propagate: they come
back in the ``error`` field, with a reserved-word hint when one applies.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Mapping, Optional

import polars as pl
from polars.exceptions import PanicException

from schemadata.core.schemas import Schema
from schemadata.core.tables import TableData
from .catalog import TableCatalog, register_data_tables, register_metadata_tables
from .identifiers import normalize_identifiers
from .models import QueryResult, StatementResult
from .reserved import remap_reserved, with_reserved_hint
from .statements import extract_table_name, split_statements, strip_comments

logger = logging.getLogger(__name__)

EMPTY_QUERY_ERROR = "Query is empty."
READ_ONLY_ERROR = "Only SELECT statements are supported."

_READ_QUERY_RE = re.compile(r"^[\s(]*(SELECT|WITH)\b", flags=re.IGNORECASE)


def _elapsed_ms(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000.0


def execute_statement(statement: str, catalog: TableCatalog) -> StatementResult:
    """Run one statement and shape its outcome. Never raises."""
    table_name = extract_table_name(statement)
    processed = remap_reserved(normalize_identifiers(statement), catalog.aliases)
    logger.debug("Executing statement: %s", processed)

    if not _READ_QUERY_RE.match(processed):
        return StatementResult(sql=statement, table_name=table_name, error=READ_ONLY_ERROR)

    try:
        frame = catalog.context.execute(processed, eager=True)
    except (Exception, PanicException) as e:  # engine faults surface as error text
        message = str(e) or type(e).__name__
        logger.debug("Statement failed: %s", message)
        return StatementResult(
            sql=statement,
            table_name=table_name,
            error=with_reserved_hint(message, statement, catalog.aliases),
        )

    if not isinstance(frame, pl.DataFrame):
        return StatementResult(sql=statement, table_name=table_name, error=READ_ONLY_ERROR)

    return StatementResult(
        sql=statement,
        table_name=table_name,
        columns=list(frame.columns),
        rows=frame.to_dicts(),
    )


def run_query(sql: str, catalog: TableCatalog, t0: Optional[float] = None) -> QueryResult:
    """Execute ``sql`` (one or more statements) against ``catalog``."""
    if t0 is None:
        t0 = time.perf_counter()

    stripped = strip_comments(sql or "").strip()
    statements = split_statements(stripped)
    if not statements:
        return QueryResult.failure(EMPTY_QUERY_ERROR, duration=_elapsed_ms(t0))

    if len(statements) > 1:
        results = [execute_statement(stmt, catalog) for stmt in statements]
        return QueryResult(
            row_count=sum(r.row_count for r in results),
            multi_results=results,
            duration=_elapsed_ms(t0),
        )

    single = execute_statement(statements[0], catalog)
    return QueryResult(
        columns=single.columns,
        rows=single.rows,
        row_count=single.row_count,
        error=single.error,
        duration=_elapsed_ms(t0),
    )


def execute_sql(sql: str, schema: Schema) -> QueryResult:
    """Run a query against the schema's virtual metadata tables.

    Args:
        sql: Query text, possibly several ``;``-separated statements.
        schema: Schema whose structure is exposed as TABLES, COLUMNS, REFS
            and ENUMS.

    Returns:
        QueryResult; failures are reported in ``error``.

    Examples:
        >>> result = execute_sql("SELECT name FROM TABLES WHERE pk_count = 0", schema)
        >>> [row["name"] for row in result.rows]
        ['Log']
    """
    t0 = time.perf_counter()
    catalog = register_metadata_tables(schema)
    return run_query(sql, catalog, t0)


def execute_data_sql(
    sql: str, table_data: Mapping[str, TableData], schema: Optional[Schema] = None
) -> QueryResult:
    """Run a query against loaded data tables.

    Args:
        sql: Query text, possibly several ``;``-separated statements.
        table_data: Loaded tables keyed by source key.
        schema: Optional schema used to resolve table names.

    Returns:
        QueryResult; failures are reported in ``error``.
    """
    t0 = time.perf_counter()
    catalog = register_data_tables(table_data, schema)
    return run_query(sql, catalog, t0)


__all__ = [
    "EMPTY_QUERY_ERROR",
    "READ_ONLY_ERROR",
    "execute_statement",
    "run_query",
    "execute_sql",
    "execute_data_sql",
]
