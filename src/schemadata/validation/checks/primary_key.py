"""Primary key uniqueness check.

Two data rows with the same primary key make every reference to that key
ambiguous. Composite keys are compared as one joined string; rows whose key
columns are all empty are counted but not compared.
"""

from __future__ import annotations

from typing import Dict

from schemadata.core.enums import Category
from schemadata.core.schemas import SchemaTable
from ..config import KEY_SEPARATOR
from . import CheckOutcome, TableFrame, ValidationContext, make_issue


class PrimaryKeyCheck:
    """Validate that primary key values are unique within a table."""

    check_id = "primary_key"

    def validate(
        self,
        frame: TableFrame,
        table: SchemaTable,
        context: ValidationContext,
    ) -> CheckOutcome:
        """Flag the second and later occurrences of each primary key.

        Args:
            frame: Data rows of the table being validated.
            table: Matching schema table.
            context: Shared run state.

        Returns:
            CheckOutcome with one check per row.
        """
        pk_cols = table.primary_key_columns
        outcome = CheckOutcome(applied=True, checks=len(frame))
        keys = frame.key(pk_cols)
        empty_key = KEY_SEPARATOR.join([""] * len(pk_cols))
        column = "+".join(pk_cols)

        first_seen: Dict[str, int] = {}
        for index, key in enumerate(keys):
            if key == empty_key:
                continue
            if key in first_seen:
                outcome.issues.append(
                    make_issue(
                        context,
                        Category.UNIQUENESS,
                        frame,
                        column,
                        index,
                        key,
                        "Duplicate primary key",
                        f'Same primary key value "{key}" as row {first_seen[key]}',
                    )
                )
            else:
                first_seen[key] = frame.sheet_row(index)
        return outcome

    def applies_to_table(self, table: SchemaTable, context: ValidationContext) -> bool:
        """Check applies to tables that declare a primary key."""
        return bool(table.primary_key_columns)
