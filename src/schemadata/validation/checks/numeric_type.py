"""Numeric type check.

Columns declared with a numeric type should hold numbers. Declared types are
advisory in spreadsheet data, so violations are warnings.
"""

from __future__ import annotations

from schemadata.core.enums import Category
from schemadata.core.schemas import SchemaTable
from schemadata.core.utils import is_numeric
from ..config import is_numeric_type
from . import CheckOutcome, TableFrame, ValidationContext, make_issue


class NumericTypeCheck:
    """Validate that numeric columns parse as numbers."""

    check_id = "type"

    def validate(
        self,
        frame: TableFrame,
        table: SchemaTable,
        context: ValidationContext,
    ) -> CheckOutcome:
        outcome = CheckOutcome(applied=True)
        for col in table.columns:
            if not is_numeric_type(col.type):
                continue
            values = frame.column(col.name)
            outcome.checks += len(values)
            invalid = (values != "") & ~values.map(is_numeric).astype(bool)
            for index in invalid[invalid].index:
                value = values[index]
                outcome.issues.append(
                    make_issue(
                        context,
                        Category.TYPE,
                        frame,
                        col.name,
                        int(index),
                        value,
                        "Type mismatch",
                        f'"{value}" is not valid for numeric type {col.type}',
                    )
                )
        return outcome

    def applies_to_table(self, table: SchemaTable, context: ValidationContext) -> bool:
        return any(is_numeric_type(c.type) for c in table.columns)
