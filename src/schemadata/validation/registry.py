"""Validation check registry and runner.

This module orchestrates validation checks:
- ALL_CHECKS: List of all available validation check instances
- run_validation(): Executes applicable checks and returns ValidationResult
- print_report(): Displays validation results to console
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Union

from schemadata.core.enums import Severity
from schemadata.core.schemas import Schema, SchemaTable
from schemadata.core.tables import TableData
from .checks import TableFrame, ValidationContext, pk_key_set
from .checks.primary_key import PrimaryKeyCheck
from .checks.not_null import NotNullCheck
from .checks.foreign_key import ForeignKeyCheck
from .checks.enum_values import EnumValuesCheck
from .checks.numeric_type import NumericTypeCheck
from .models import TableValidationStat, ValidationIssue, ValidationResult

logger = logging.getLogger(__name__)


# Registry of all available validation checks
ALL_CHECKS = [
    PrimaryKeyCheck(),
    NotNullCheck(),
    ForeignKeyCheck(),
    EnumValuesCheck(),
    NumericTypeCheck(),
]

# Stat flag set when a check applies to a table
STAT_FLAGS = {
    "primary_key": "checked_pk",
    "not_null": "checked_not_null",
    "foreign_key": "checked_fk",
    "enum": "checked_enum",
    "type": "checked_type",
}


def run_validation(
    schema: Schema,
    tables: Union[Mapping[str, TableData], Iterable[TableData]],
) -> ValidationResult:
    """Run all applicable validation checks on loaded data tables.

    Data tables are matched to schema tables by name, case-insensitively.
    Primary-key sets of every matched table are computed before any check
    runs, so foreign keys resolve regardless of table order. Tables without
    a schema match are listed in the stats with zero checks.

    Args:
        schema: Schema declaring the constraints.
        tables: Loaded tables, as a mapping or a plain iterable.

    Returns:
        ValidationResult with issues in discovery order and per-table stats.

    Examples:
        >>> result = run_validation(schema, report.tables)
        >>> print(result.summary())
    """
    data_tables: List[TableData] = list(
        tables.values() if isinstance(tables, Mapping) else tables
    )
    context = ValidationContext(schema=schema)

    matched: Dict[int, SchemaTable] = {}
    frames: Dict[int, TableFrame] = {}
    for i, data in enumerate(data_tables):
        frames[i] = TableFrame.from_table(data)
        st = schema.table_by_name(data.name)
        if st is None:
            continue
        matched[i] = st
        keys = pk_key_set(frames[i], st)
        if keys is not None:
            context.pk_values[st.name.lower()] = keys

    issues: List[ValidationIssue] = []
    stats: List[TableValidationStat] = []
    for i, data in enumerate(data_tables):
        st = matched.get(i)
        stat = TableValidationStat(name=data.name, matched=st is not None, rows=data.row_count)
        stats.append(stat)
        if st is None:
            logger.debug("Table %s has no schema match", data.name)
            continue

        table_issues: List[ValidationIssue] = []
        for check in ALL_CHECKS:
            if not check.applies_to_table(st, context):
                continue
            outcome = check.validate(frames[i], st, context)
            if outcome.applied:
                setattr(stat, STAT_FLAGS[check.check_id], True)
            stat.checks += outcome.checks
            table_issues.extend(outcome.issues)

        stat.errors = sum(1 for x in table_issues if x.severity == Severity.ERROR)
        stat.warnings = sum(1 for x in table_issues if x.severity == Severity.WARNING)
        issues.extend(table_issues)
        logger.debug(
            "Validated %s: %d checks, %d errors, %d warnings",
            data.name,
            stat.checks,
            stat.errors,
            stat.warnings,
        )

    result = ValidationResult.from_issues(issues, stats)
    logger.info(
        "Validated %d tables (%d matched): score %d, %d errors, %d warnings",
        len(stats),
        result.matched_tables,
        result.score,
        result.error_count,
        result.warning_count,
    )
    return result


def print_report(result: ValidationResult) -> None:
    """Print validation result to console.

    Displays a summary followed by the issues found.

    Args:
        result: ValidationResult to display.

    Examples:
        >>> print_report(run_validation(schema, tables))
        Validation Summary:
          Tables: 2 loaded (2 matched schema), 5 rows
          Checks: 15 executed, score 93
          Issues: 1 errors, 0 warnings

        Issues:
        ❌ [referential] orders.user_id row 4: "99" does not exist in table users
    """
    print(result.to_console_summary())


__all__ = ["ALL_CHECKS", "run_validation", "print_report"]
