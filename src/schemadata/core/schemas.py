"""Schema model consumed by the query and validation layers.

The schema is produced by an external schema-text parser and is read-only
here. ``Schema.from_dict`` accepts the parser's serialized form, with either
camelCase (``isPrimaryKey``, ``fromTable``) or snake_case keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key among ``keys``."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True)
class SchemaColumn:
    """A column declared on a schema table."""

    name: str
    type: str = ""
    is_primary_key: bool = False
    is_foreign_key: bool = False
    is_unique: bool = False
    is_not_null: bool = False
    default_value: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchemaColumn":
        return cls(
            name=str(data["name"]),
            type=str(_pick(data, "type", default="")),
            is_primary_key=bool(_pick(data, "is_primary_key", "isPrimaryKey", "pk", default=False)),
            is_foreign_key=bool(_pick(data, "is_foreign_key", "isForeignKey", "fk", default=False)),
            is_unique=bool(_pick(data, "is_unique", "isUnique", "unique", default=False)),
            is_not_null=bool(_pick(data, "is_not_null", "isNotNull", "not_null", default=False)),
            default_value=_opt_str(_pick(data, "default_value", "defaultValue", "default")),
            note=_opt_str(_pick(data, "note")),
        )


@dataclass(frozen=True)
class SchemaTable:
    """A table declared in the schema."""

    id: str
    name: str
    columns: List[SchemaColumn] = field(default_factory=list)
    alias: Optional[str] = None
    note: Optional[str] = None
    group_name: Optional[str] = None

    @property
    def primary_key_columns(self) -> List[str]:
        """Names of the primary key columns, in declaration order."""
        return [c.name for c in self.columns if c.is_primary_key]

    def column(self, name: str) -> Optional[SchemaColumn]:
        """Find a column by name, case-insensitively."""
        lower = name.lower()
        for col in self.columns:
            if col.name.lower() == lower:
                return col
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchemaTable":
        name = str(data["name"])
        return cls(
            id=str(_pick(data, "id", default=name)),
            name=name,
            columns=[SchemaColumn.from_dict(c) for c in data.get("columns") or []],
            alias=_opt_str(_pick(data, "alias")),
            note=_opt_str(_pick(data, "note")),
            group_name=_opt_str(_pick(data, "group_name", "groupName")),
        )


@dataclass(frozen=True)
class SchemaRef:
    """A relationship between two tables, referenced by table id."""

    from_table: str
    from_columns: List[str]
    to_table: str
    to_columns: List[str]
    type: str = "many-to-one"
    id: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchemaRef":
        return cls(
            from_table=str(_pick(data, "from_table", "fromTable")),
            from_columns=[str(c) for c in _pick(data, "from_columns", "fromColumns", default=[])],
            to_table=str(_pick(data, "to_table", "toTable")),
            to_columns=[str(c) for c in _pick(data, "to_columns", "toColumns", default=[])],
            type=str(_pick(data, "type", "relation", default="many-to-one")),
            id=_opt_str(_pick(data, "id")),
            name=_opt_str(_pick(data, "name")),
        )


@dataclass(frozen=True)
class EnumValue:
    name: str
    note: Optional[str] = None


@dataclass(frozen=True)
class SchemaEnum:
    """An enumeration type and its allowed values."""

    name: str
    values: List[EnumValue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchemaEnum":
        values = []
        for v in data.get("values") or []:
            if isinstance(v, Mapping):
                values.append(EnumValue(name=str(v["name"]), note=_opt_str(v.get("note"))))
            else:
                values.append(EnumValue(name=str(v)))
        return cls(name=str(data["name"]), values=values)


@dataclass(frozen=True)
class Schema:
    """Declarative structure: tables, relationships and enumerations.

    Examples:
        >>> schema = Schema.from_dict({"tables": [{"name": "Character", "columns": []}]})
        >>> schema.table_by_name("CHARACTER").name
        'Character'
    """

    tables: List[SchemaTable] = field(default_factory=list)
    refs: List[SchemaRef] = field(default_factory=list)
    enums: List[SchemaEnum] = field(default_factory=list)

    def table_by_id(self, table_id: str) -> Optional[SchemaTable]:
        for table in self.tables:
            if table.id == table_id:
                return table
        return None

    def table_by_name(self, name: str) -> Optional[SchemaTable]:
        """Find a table by name, case-insensitively."""
        lower = name.lower()
        for table in self.tables:
            if table.name.lower() == lower:
                return table
        return None

    def enum_by_name(self, name: str) -> Optional[SchemaEnum]:
        """Find an enum by name, case-insensitively."""
        lower = name.lower()
        for enum in self.enums:
            if enum.name.lower() == lower:
                return enum
        return None

    def table_names(self) -> Dict[str, str]:
        """Map lower-cased table names to their declared spelling."""
        return {t.name.lower(): t.name for t in self.tables}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Schema":
        """Build a schema from the parser's serialized form.

        Raises:
            ValueError: If a table, ref or enum entry misses a required field.
        """
        try:
            return cls(
                tables=[SchemaTable.from_dict(t) for t in data.get("tables") or []],
                refs=[SchemaRef.from_dict(r) for r in data.get("refs") or []],
                enums=[SchemaEnum.from_dict(e) for e in data.get("enums") or []],
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed schema document: {e!r}") from e


def load_schema(path: Path) -> Schema:
    """Load a serialized schema from a JSON or YAML file.

    Args:
        path: Path to the schema document (JSON is valid YAML).

    Returns:
        The parsed Schema.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be parsed or is not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to read schema file {path}: {e}") from e
    if not isinstance(data, Mapping):
        raise ValueError(f"Schema file {path} must contain a mapping at the top level")
    return Schema.from_dict(data)


__all__ = [
    "SchemaColumn",
    "SchemaTable",
    "SchemaRef",
    "EnumValue",
    "SchemaEnum",
    "Schema",
    "load_schema",
]
