"""Enum membership check.

A column whose declared type names a schema enum may only hold one of that
enum's values, compared case-insensitively. Empty cells are not checked here.
"""

from __future__ import annotations

from typing import Optional

from schemadata.core.enums import Category
from schemadata.core.schemas import SchemaColumn, SchemaEnum, SchemaTable
from ..config import MAX_LISTED_ENUM_VALUES
from . import CheckOutcome, TableFrame, ValidationContext, make_issue


def column_enum(col: SchemaColumn, context: ValidationContext) -> Optional[SchemaEnum]:
    """Enum named by the column type, with or without a schema qualifier."""
    if not col.type:
        return None
    found = context.schema.enum_by_name(col.type)
    if found is None and "." in col.type:
        found = context.schema.enum_by_name(col.type.rsplit(".", 1)[1])
    return found


def _allowed_text(enum: SchemaEnum) -> str:
    names = [v.name for v in enum.values[:MAX_LISTED_ENUM_VALUES]]
    more = "..." if len(enum.values) > MAX_LISTED_ENUM_VALUES else ""
    return ", ".join(names) + more


class EnumValuesCheck:
    """Validate that enum-typed columns hold declared enum values."""

    check_id = "enum"

    def validate(
        self,
        frame: TableFrame,
        table: SchemaTable,
        context: ValidationContext,
    ) -> CheckOutcome:
        outcome = CheckOutcome()
        for col in table.columns:
            enum = column_enum(col, context)
            if enum is None:
                continue
            outcome.applied = True
            values = frame.column(col.name)
            outcome.checks += len(values)
            allowed = {v.name.lower() for v in enum.values}
            invalid = (values != "") & ~values.str.lower().isin(allowed)
            for index in invalid[invalid].index:
                value = values[index]
                outcome.issues.append(
                    make_issue(
                        context,
                        Category.ENUM,
                        frame,
                        col.name,
                        int(index),
                        value,
                        "Invalid enum value",
                        f'"{value}" is not defined in {col.type} (allowed: {_allowed_text(enum)})',
                    )
                )
        return outcome

    def applies_to_table(self, table: SchemaTable, context: ValidationContext) -> bool:
        return any(column_enum(c, context) is not None for c in table.columns)
