"""Validation data models.

This module defines core data structures for validation results:
- ValidationIssue: One violating value found in a data row
- TableValidationStat: Per-table counters for a validation run
- ValidationResult: Aggregated results from all checks
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from schemadata.core.enums import Category, Severity


@dataclass(frozen=True)
class ValidationIssue:
    """A single constraint violation.

    Attributes:
        id: Identifier unique within one validation run (e.g., "dv-3").
        severity: Severity level of the violation.
        category: Constraint family that was violated.
        table: Data table name as loaded from the workbook.
        column: Schema column name.
        row: 1-based sheet row of the offending value.
        value: The offending value ("" when empty).
        title: Short heading (e.g., "Foreign key violation").
        description: Human-readable explanation.

    Examples:
        >>> ValidationIssue(
        ...     id="dv-1",
        ...     severity=Severity.ERROR,
        ...     category=Category.REFERENTIAL,
        ...     table="orders",
        ...     column="user_id",
        ...     row=4,
        ...     value="99",
        ...     title="Foreign key violation",
        ...     description='"99" does not exist in table users',
        ... )
    """

    id: str
    severity: Severity
    category: Category
    table: str
    column: str
    row: int
    value: str
    title: str
    description: str

    def __post_init__(self) -> None:
        """Validate field constraints."""
        try:
            object.__setattr__(self, "severity", Severity(self.severity))
        except ValueError as e:
            raise ValueError(
                f"Invalid severity: {self.severity}. Must be 'error', 'warning' or 'info'."
            ) from e
        try:
            object.__setattr__(self, "category", Category(self.category))
        except ValueError as e:
            raise ValueError(f"Invalid category: {self.category}") from e
        if self.row < 1:
            raise ValueError(f"row must be 1-based, got {self.row}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "category": self.category.value,
            "table": self.table,
            "column": self.column,
            "row": self.row,
            "value": self.value,
            "title": self.title,
            "description": self.description,
        }


@dataclass
class TableValidationStat:
    """Counters for one data table.

    ``matched`` is False when no schema table carries the data table's name;
    such tables are listed with zero checks.
    """

    name: str
    matched: bool
    rows: int
    checks: int = 0
    errors: int = 0
    warnings: int = 0
    checked_pk: bool = False
    checked_not_null: bool = False
    checked_fk: bool = False
    checked_enum: bool = False
    checked_type: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "matched": self.matched,
            "rows": self.rows,
            "checks": self.checks,
            "errors": self.errors,
            "warnings": self.warnings,
            "checkedPK": self.checked_pk,
            "checkedNotNull": self.checked_not_null,
            "checkedFK": self.checked_fk,
            "checkedEnum": self.checked_enum,
            "checkedType": self.checked_type,
        }


@dataclass
class ValidationResult:
    """Aggregated validation results for a set of data tables.

    Attributes:
        issues: All issues in discovery order.
        tables: Names of every data table considered.
        table_stats: One stat entry per data table.
        score: Integer in [0, 100]; 100 when nothing was checked.
        by_category: Issues grouped by category value.
        by_table: Issues grouped by data table name.

    Examples:
        >>> result = run_validation(schema, tables)
        >>> result.has_errors()
        True
        >>> result.score
        87
    """

    issues: List[ValidationIssue] = field(default_factory=list)
    tables: List[str] = field(default_factory=list)
    table_stats: List[TableValidationStat] = field(default_factory=list)
    score: int = 100
    by_category: Dict[str, List[ValidationIssue]] = field(default_factory=dict)
    by_table: Dict[str, List[ValidationIssue]] = field(default_factory=dict)

    @classmethod
    def from_issues(
        cls,
        issues: List[ValidationIssue],
        table_stats: List[TableValidationStat],
    ) -> "ValidationResult":
        """Build a result and its derived indexes from raw issues and stats."""
        by_category: Dict[str, List[ValidationIssue]] = {}
        by_table: Dict[str, List[ValidationIssue]] = {}
        for issue in issues:
            by_category.setdefault(issue.category.value, []).append(issue)
            by_table.setdefault(issue.table, []).append(issue)

        total_checks = sum(s.checks for s in table_stats)
        if total_checks > 0:
            # Halves round up: 62.5 scores 63
            score = math.floor(100 * (total_checks - len(issues)) / total_checks + 0.5)
            score = max(0, min(100, score))
        else:
            score = 100

        return cls(
            issues=list(issues),
            tables=[s.name for s in table_stats],
            table_stats=list(table_stats),
            score=score,
            by_category=by_category,
            by_table=by_table,
        )

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == Severity.WARNING)

    @property
    def info_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == Severity.INFO)

    @property
    def total_rows(self) -> int:
        return sum(s.rows for s in self.table_stats)

    @property
    def total_checks(self) -> int:
        return sum(s.checks for s in self.table_stats)

    @property
    def matched_tables(self) -> int:
        return sum(1 for s in self.table_stats if s.matched)

    def has_errors(self, strict: bool = False) -> bool:
        """Check if validation failed.

        Args:
            strict: If True, treat warnings as errors. Default False.

        Returns:
            True if any errors found (or warnings in strict mode), False otherwise.
        """
        if self.error_count > 0:
            return True
        return strict and self.warning_count > 0

    def summary(self) -> str:
        """Generate a concise text summary of validation results.

        Examples:
            >>> print(result.summary())
            Validation Summary:
              Tables: 3 loaded (2 matched schema), 120 rows
              Checks: 480 executed, score 98
              Issues: 7 errors, 2 warnings
        """
        return (
            f"Validation Summary:\n"
            f"  Tables: {len(self.table_stats)} loaded ({self.matched_tables} matched schema), "
            f"{self.total_rows} rows\n"
            f"  Checks: {self.total_checks} executed, score {self.score}\n"
            f"  Issues: {self.error_count} errors, {self.warning_count} warnings"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issues": [i.to_dict() for i in self.issues],
            "tables": list(self.tables),
            "tableStats": [s.to_dict() for s in self.table_stats],
            "score": self.score,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
            "infoCount": self.info_count,
            "byCategory": {
                c.value: len(self.by_category.get(c.value, [])) for c in Category
            },
            "byTable": {k: [i.id for i in v] for k, v in self.by_table.items()},
            "totalRows": self.total_rows,
            "totalChecks": self.total_checks,
        }

    def to_markdown(self) -> str:
        """Generate detailed Markdown validation report.

        Returns:
            Formatted Markdown string with a summary, a per-table status table
            and the issues grouped by category.
        """
        from datetime import datetime

        errors = self.error_count
        warnings = self.warning_count

        lines = [
            "# Data Validation Report",
            "",
            f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"**Score:** {self.score}/100",
            "",
            "## Summary",
            "",
            f"- **Tables:** {len(self.table_stats)} ({self.matched_tables} matched schema)",
            f"- **Rows:** {self.total_rows}",
            f"- **Checks:** {self.total_checks}",
            f"- **Errors:** {errors} ❌" if errors > 0 else f"- **Errors:** {errors}",
            f"- **Warnings:** {warnings} ⚠️" if warnings > 0 else f"- **Warnings:** {warnings}",
            "",
            "## Tables",
            "",
            "| Table | Matched | Rows | Checks | Errors | Warnings |",
            "|---|---|---|---|---|---|",
        ]
        for s in self.table_stats:
            lines.append(
                f"| {s.name} | {'yes' if s.matched else 'no'} | {s.rows} | {s.checks} "
                f"| {s.errors} | {s.warnings} |"
            )
        lines.append("")

        if not self.issues:
            lines.append("## ✅ No Issues Found")
            lines.append("")
        else:
            for category, issues in sorted(self.by_category.items()):
                lines.append(f"## {category} ({len(issues)} issues)")
                lines.append("")
                for issue in issues:
                    icon = "❌" if issue.severity == Severity.ERROR else "⚠️"
                    lines.append(
                        f"- {icon} {issue.table}.{issue.column} row {issue.row}: "
                        f"{issue.title}. {issue.description}"
                    )
                lines.append("")

        return "\n".join(lines)

    def to_json(self) -> str:
        """Generate detailed JSON validation report."""
        from datetime import datetime

        data = self.to_dict()
        data["generatedAt"] = datetime.now().isoformat()
        return json.dumps(data, indent=2, ensure_ascii=False)

    def to_console_summary(self, max_issues: int = 20) -> str:
        """Generate a concise summary for console output.

        Args:
            max_issues: Maximum number of issues to list individually.
        """
        lines = [self.summary(), ""]

        if not self.issues:
            lines.append("✅ All validation checks passed!")
            return "\n".join(lines)

        lines.append("Issues:")
        for issue in self.issues[:max_issues]:
            icon = "❌" if issue.severity == Severity.ERROR else "⚠️"
            lines.append(
                f"{icon} [{issue.category.value}] {issue.table}.{issue.column} "
                f"row {issue.row}: {issue.description}"
            )
        hidden = len(self.issues) - max_issues
        if hidden > 0:
            lines.append(f"   ... and {hidden} more")
        return "\n".join(lines)


__all__ = ["ValidationIssue", "TableValidationStat", "ValidationResult"]
