"""Validation configuration constants.

This module centralizes severity rules and type keywords used by the checks.
Adjust these constants to tune validation behavior.

Severity Levels:
    - "error": The data contradicts a declared constraint
    - "warning": The data looks wrong, but the declaration is advisory
    - "info": Informational findings
"""

from __future__ import annotations

import re

from schemadata.core.enums import Category, Severity

# ============================================================================
# SEVERITY RULES
# ============================================================================

# Declared type names are advisory, so type mismatches are only warnings
CATEGORY_SEVERITY = {
    Category.UNIQUENESS: Severity.ERROR,
    Category.REQUIRED: Severity.ERROR,
    Category.REFERENTIAL: Severity.ERROR,
    Category.ENUM: Severity.ERROR,
    Category.TYPE: Severity.WARNING,
}


# ============================================================================
# TYPE RULES
# ============================================================================

NUMERIC_TYPE_KEYWORDS = frozenset(
    {
        "int",
        "integer",
        "bigint",
        "smallint",
        "tinyint",
        "mediumint",
        "float",
        "double",
        "decimal",
        "numeric",
        "real",
        "long",
        "number",
        "serial",
        "bigserial",
        "smallserial",
    }
)

_TYPE_BASE_RE = re.compile(r"^\s*([a-z_]+)")


# ============================================================================
# KEY RULES
# ============================================================================

# Composite key parts are compared as one string joined with this separator
KEY_SEPARATOR = "|"

# Enum values listed in a violation description
MAX_LISTED_ENUM_VALUES = 5


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def get_severity(category: Category) -> Severity:
    """Get the severity of issues in a category.

    Args:
        category: Issue category (e.g., Category.TYPE or "type").

    Returns:
        Severity for issues of that category.

    Raises:
        ValueError: If the category is unknown.

    Examples:
        >>> get_severity(Category.REFERENTIAL)
        <Severity.ERROR: 'error'>
        >>> get_severity("type")
        <Severity.WARNING: 'warning'>
    """
    try:
        return CATEGORY_SEVERITY[Category(category)]
    except (KeyError, ValueError) as e:
        raise ValueError(
            f"Unknown category: {category}. Valid categories: "
            f"{', '.join(c.value for c in Category)}"
        ) from e


def is_numeric_type(type_name: str) -> bool:
    """True if a declared column type names a numeric type.

    The base name is compared, ignoring size/precision suffixes, so
    ``decimal(10,2)``, ``INT4`` and ``bigint unsigned`` all qualify while
    ``point`` and ``interval`` do not.
    """
    m = _TYPE_BASE_RE.match(type_name.lower())
    if not m:
        return False
    base = m.group(1)
    return base in NUMERIC_TYPE_KEYWORDS


__all__ = [
    "CATEGORY_SEVERITY",
    "NUMERIC_TYPE_KEYWORDS",
    "KEY_SEPARATOR",
    "MAX_LISTED_ENUM_VALUES",
    "get_severity",
    "is_numeric_type",
]
