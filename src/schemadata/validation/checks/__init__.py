"""Validation checks base interface.

This module defines the protocol (interface) that all validation checks must
implement, plus the shared state a check receives. Each check verifies one
declared constraint family (primary keys, NOT NULL, foreign keys, enum
membership, numeric types) for one data table at a time.

To implement a new validation check:

1. Create a new file in this directory (e.g., `my_check.py`)
2. Define a class that implements the ValidationCheck protocol
3. Implement the required methods: `validate()` and `applies_to_table()`
4. Add the check to the ALL_CHECKS list in registry.py

Example:
    ```python
    # checks/my_check.py
    import pandas as pd
    from schemadata.core.schemas import SchemaTable
    from . import CheckOutcome, ValidationContext

    class MyCheck:
        check_id = "my_check"

        def validate(self, df, table, context) -> CheckOutcome:
            outcome = CheckOutcome()
            # Validation logic here
            return outcome

        def applies_to_table(self, table, context) -> bool:
            return True
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Set

import pandas as pd

from schemadata.core.enums import Category
from schemadata.core.schemas import Schema, SchemaTable
from schemadata.core.tables import TableData
from ..config import KEY_SEPARATOR, get_severity
from ..models import ValidationIssue

ISSUE_ID_PREFIX = "dv-"


@dataclass
class ValidationContext:
    """State shared by all checks during one validation run.

    Attributes:
        schema: The schema being validated against.
        pk_values: Lower-cased schema table name → set of primary-key keys
            found in its data table. Filled for every matched table before
            any check runs.
        issue_counter: Last issue number handed out.
    """

    schema: Schema
    pk_values: Dict[str, Set[str]] = field(default_factory=dict)
    issue_counter: int = 0

    def next_issue_id(self) -> str:
        self.issue_counter += 1
        return f"{ISSUE_ID_PREFIX}{self.issue_counter}"


@dataclass
class TableFrame:
    """A data table as a string DataFrame plus its sheet row numbers."""

    data: TableData
    df: pd.DataFrame

    @classmethod
    def from_table(cls, data: TableData) -> "TableFrame":
        records = [{h: row.get(h) or "" for h in data.headers} for row in data.rows]
        df = pd.DataFrame(records, columns=data.headers, dtype=object)
        return cls(data=data, df=df)

    @property
    def name(self) -> str:
        return self.data.name

    def __len__(self) -> int:
        return len(self.df)

    def column(self, name: str) -> pd.Series:
        """Values of a schema column, resolved case-insensitively.

        A column missing from the sheet yields all-empty values.
        """
        lowered = name.lower()
        for header in self.df.columns:
            if str(header).lower() == lowered:
                return self.df[header]
        return pd.Series([""] * len(self.df), index=self.df.index, dtype=object)

    def key(self, names: Sequence[str]) -> pd.Series:
        """Composite key of the given columns, joined with KEY_SEPARATOR."""
        parts = [self.column(n) for n in names]
        if len(parts) == 1:
            return parts[0]
        return parts[0].str.cat(parts[1:], sep=KEY_SEPARATOR)

    def sheet_row(self, index: int) -> int:
        return self.data.sheet_row(index)


@dataclass
class CheckOutcome:
    """Result of running one check on one table.

    Attributes:
        applied: False when the check found nothing it could verify.
        checks: Number of individual value checks performed.
        issues: Violations found, in row order.
    """

    applied: bool = False
    checks: int = 0
    issues: List[ValidationIssue] = field(default_factory=list)


def make_issue(
    context: ValidationContext,
    category: Category,
    frame: TableFrame,
    column: str,
    index: int,
    value: str,
    title: str,
    description: str,
) -> ValidationIssue:
    """Create an issue with the next run-unique id and the category's severity."""
    return ValidationIssue(
        id=context.next_issue_id(),
        severity=get_severity(category),
        category=category,
        table=frame.name,
        column=column,
        row=frame.sheet_row(index),
        value=value,
        title=title,
        description=description,
    )


class ValidationCheck(Protocol):
    """Protocol defining the interface for validation checks.

    All validation checks must implement this interface. Use duck typing
    (Protocol) for flexibility - no need to inherit from a base class.

    Attributes:
        check_id: Identifier used in stats and logs.

    Methods:
        validate: Run the validation check and return its outcome.
        applies_to_table: Determine if the table declares anything to check.
    """

    check_id: str

    def validate(
        self,
        frame: TableFrame,
        table: SchemaTable,
        context: ValidationContext,
    ) -> CheckOutcome:
        """Run the validation check.

        Args:
            frame: Data rows of the table being validated.
            table: Matching schema table.
            context: Shared run state (schema, precomputed key sets, id counter).

        Returns:
            CheckOutcome with the check count and any issues found.

        Examples:
            >>> outcome = check.validate(frame, table, context)
            >>> for issue in outcome.issues:
            ...     print(f"{issue.column} row {issue.row}: {issue.description}")
        """
        ...

    def applies_to_table(self, table: SchemaTable, context: ValidationContext) -> bool:
        """Check if this validation applies to a given schema table.

        Args:
            table: Matching schema table.
            context: Shared run state.

        Returns:
            True if check should run for this table, False to skip.
        """
        ...


def pk_key_set(frame: TableFrame, table: SchemaTable) -> Optional[Set[str]]:
    """Set of primary-key keys present in a table, or None without a PK."""
    pk_cols = table.primary_key_columns
    if not pk_cols:
        return None
    return set(frame.key(pk_cols))


__all__ = [
    "ValidationCheck",
    "ValidationContext",
    "TableFrame",
    "CheckOutcome",
    "make_issue",
    "pk_key_set",
]
