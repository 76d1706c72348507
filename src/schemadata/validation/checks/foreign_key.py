"""Foreign key referential integrity check.

Every non-empty foreign key value must exist among the primary keys of the
referenced table's data. A relationship is verified only from the side whose
columns are declared as foreign keys. Relationships whose target table is
not in the schema, or whose target has no loaded primary-key data, are
skipped without issues.
"""

from __future__ import annotations

import logging
from typing import List

from schemadata.core.enums import Category
from schemadata.core.schemas import SchemaRef, SchemaTable
from ..config import KEY_SEPARATOR
from . import CheckOutcome, TableFrame, ValidationContext, make_issue

logger = logging.getLogger(__name__)


def outgoing_refs(table: SchemaTable, context: ValidationContext) -> List[SchemaRef]:
    """Relationships leaving ``table`` through its foreign key columns."""
    name = table.name.lower()
    refs = []
    for ref in context.schema.refs:
        source = context.schema.table_by_id(ref.from_table)
        if source is None or source.name.lower() != name or not ref.from_columns:
            continue
        cols = [table.column(c) for c in ref.from_columns]
        if all(c is not None and c.is_foreign_key for c in cols):
            refs.append(ref)
    return refs


class ForeignKeyCheck:
    """Validate that foreign key values resolve to an existing primary key."""

    check_id = "foreign_key"

    def validate(
        self,
        frame: TableFrame,
        table: SchemaTable,
        context: ValidationContext,
    ) -> CheckOutcome:
        outcome = CheckOutcome()
        for ref in outgoing_refs(table, context):
            target = context.schema.table_by_id(ref.to_table)
            if target is None:
                logger.debug("Ref %s -> %s: target table not in schema", table.name, ref.to_table)
                continue
            target_keys = context.pk_values.get(target.name.lower())
            if target_keys is None:
                logger.debug("Ref %s -> %s: no primary key data", table.name, target.name)
                continue

            outcome.applied = True
            outcome.checks += len(frame)
            values = frame.key(ref.from_columns)
            empty_key = KEY_SEPARATOR.join([""] * len(ref.from_columns))
            column = "+".join(ref.from_columns)
            missing = (values != empty_key) & ~values.isin(target_keys)
            for index in missing[missing].index:
                value = values[index]
                outcome.issues.append(
                    make_issue(
                        context,
                        Category.REFERENTIAL,
                        frame,
                        column,
                        int(index),
                        value,
                        "Foreign key violation",
                        f'"{value}" does not exist in table {target.name}',
                    )
                )
        return outcome

    def applies_to_table(self, table: SchemaTable, context: ValidationContext) -> bool:
        return bool(outgoing_refs(table, context))
