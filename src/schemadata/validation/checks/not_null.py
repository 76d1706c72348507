"""NOT NULL check.

Required columns must hold a value in every row. Primary key columns are left
to the uniqueness check. A column missing from the sheet counts as empty.
"""

from __future__ import annotations

from schemadata.core.enums import Category
from schemadata.core.schemas import SchemaTable
from . import CheckOutcome, TableFrame, ValidationContext, make_issue


class NotNullCheck:
    """Validate that NOT NULL columns are never empty."""

    check_id = "not_null"

    def validate(
        self,
        frame: TableFrame,
        table: SchemaTable,
        context: ValidationContext,
    ) -> CheckOutcome:
        outcome = CheckOutcome(applied=True)
        for col in table.columns:
            if not col.is_not_null or col.is_primary_key:
                continue
            values = frame.column(col.name)
            outcome.checks += len(values)
            empty = values == ""
            for index in empty[empty].index:
                outcome.issues.append(
                    make_issue(
                        context,
                        Category.REQUIRED,
                        frame,
                        col.name,
                        int(index),
                        "(empty)",
                        "NOT NULL violation",
                        "Required column is empty",
                    )
                )
        return outcome

    def applies_to_table(self, table: SchemaTable, context: ValidationContext) -> bool:
        return any(c.is_not_null and not c.is_primary_key for c in table.columns)
