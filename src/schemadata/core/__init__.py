"""Core data model shared by the query, ingestion and validation layers."""

from .enums import Category, RelationType, Severity
from .schemas import (
    EnumValue,
    Schema,
    SchemaColumn,
    SchemaEnum,
    SchemaRef,
    SchemaTable,
    load_schema,
)
from .tables import TableData, TableDataMap

__all__ = [
    "Category",
    "RelationType",
    "Severity",
    "EnumValue",
    "Schema",
    "SchemaColumn",
    "SchemaEnum",
    "SchemaRef",
    "SchemaTable",
    "load_schema",
    "TableData",
    "TableDataMap",
]
