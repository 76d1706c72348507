"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Severity of a validation issue.

    Values are strings to ease serialization and CLI interchange.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Category(str, Enum):
    """Constraint family a validation issue belongs to."""

    REFERENTIAL = "referential"
    UNIQUENESS = "uniqueness"
    REQUIRED = "required"
    ENUM = "enum"
    TYPE = "type"


class RelationType(str, Enum):
    """Cardinality of a schema relationship."""

    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"


__all__ = ["Severity", "Category", "RelationType"]
