"""Query engine public API.

Exposes the functions used by the CLI and by automated callers. The
implementation normalizes schema-domain SQL and runs it on a polars
SQLContext built fresh for every call.
"""

from .catalog import TableCatalog, register_data_tables, register_metadata_tables
from .context import describe_data_tables
from .executor import execute_data_sql, execute_sql
from .identifiers import normalize_identifiers
from .metadata import VIRTUAL_TABLE_SCHEMA, build_virtual_tables
from .models import QueryResult, StatementResult
from .reserved import INTERNAL_PREFIX, RESERVED_WORDS, internal_alias, is_reserved, remap_reserved
from .statements import extract_table_name, split_statements, strip_comments

__all__ = [
    "TableCatalog",
    "register_data_tables",
    "register_metadata_tables",
    "describe_data_tables",
    "execute_data_sql",
    "execute_sql",
    "normalize_identifiers",
    "VIRTUAL_TABLE_SCHEMA",
    "build_virtual_tables",
    "QueryResult",
    "StatementResult",
    "INTERNAL_PREFIX",
    "RESERVED_WORDS",
    "internal_alias",
    "is_reserved",
    "remap_reserved",
    "extract_table_name",
    "split_statements",
    "strip_comments",
]
