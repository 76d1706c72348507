"""Data validation against schema constraints.

Public API:
 - run_validation, print_report, ALL_CHECKS
 - ValidationIssue, TableValidationStat, ValidationResult
"""

from .models import TableValidationStat, ValidationIssue, ValidationResult
from .registry import ALL_CHECKS, print_report, run_validation

__all__ = [
    "ALL_CHECKS",
    "print_report",
    "run_validation",
    "TableValidationStat",
    "ValidationIssue",
    "ValidationResult",
]
