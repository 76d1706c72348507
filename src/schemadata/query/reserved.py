"""Reserved-name registry and remapper.

Schema tables are often named after words the SQL engine treats as syntax
(``Enum``, ``Index``, ``Type``, ``User``). Such a table is registered under an
internal alias, ``INTERNAL_PREFIX`` + lower-cased name, and references to it
in query text are rewritten to that alias.

Only two kinds of positions are rewritten, both outside string literals:

- quoted identifiers: ``"Index"``, ```Index```, ``[Index]``
- a bare name directly after FROM, JOIN, UPDATE, INTO or TABLE

Anything else (``WHERE note = 'Index'``, column names, aliases) is left
alone.
"""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional

from .identifiers import rewrite_outside_literals

INTERNAL_PREFIX = "_rsv_"

RESERVED_WORDS = frozenset(
    {
        "all",
        "any",
        "asc",
        "by",
        "case",
        "check",
        "column",
        "columns",
        "date",
        "default",
        "desc",
        "end",
        "enum",
        "group",
        "index",
        "interval",
        "key",
        "level",
        "limit",
        "match",
        "offset",
        "order",
        "range",
        "role",
        "row",
        "rows",
        "set",
        "some",
        "table",
        "tables",
        "time",
        "timestamp",
        "type",
        "user",
        "value",
        "values",
        "window",
    }
)

_TABLE_KEYWORDS = r"FROM|JOIN|UPDATE|INTO|TABLE"

_RESERVED_ERROR_RE = re.compile(
    r"sql parser error|expected|reserved|keyword|syntax|unexpected|not found|unable to find",
    flags=re.IGNORECASE,
)


def is_reserved(name: str) -> bool:
    """True if ``name`` collides with an engine keyword (case-insensitive)."""
    return name.lower() in RESERVED_WORDS


def internal_alias(name: str) -> str:
    """Return the safe internal name for a reserved table name.

    Examples:
        >>> internal_alias("Index")
        '_rsv_index'
    """
    return f"{INTERNAL_PREFIX}{name.lower()}"


def _alternation(names: List[str]) -> str:
    # Longest first so "values" wins over "value"
    return "|".join(re.escape(n) for n in sorted(names, key=len, reverse=True))


def remap_reserved(sql: str, aliases: Mapping[str, str]) -> str:
    """Rewrite references to reserved table names into their internal alias.

    Args:
        sql: Statement text.
        aliases: Original table name → internal alias, for this execution.

    Returns:
        The rewritten statement; unchanged when ``aliases`` is empty.
    """
    if not aliases:
        return sql
    lookup: Dict[str, str] = {name.lower(): alias for name, alias in aliases.items()}
    alt = _alternation(list(lookup))
    quoted_re = re.compile(rf'"({alt})"|`({alt})`|\[({alt})\]', flags=re.IGNORECASE)
    keyword_re = re.compile(
        rf"\b({_TABLE_KEYWORDS})(\s+)({alt})(?!\w)", flags=re.IGNORECASE
    )

    def _quoted(m: re.Match) -> str:
        name = m.group(1) or m.group(2) or m.group(3)
        return lookup[name.lower()]

    def _after_keyword(m: re.Match) -> str:
        return f"{m.group(1)}{m.group(2)}{lookup[m.group(3).lower()]}"

    def _segment(text: str) -> str:
        text = quoted_re.sub(_quoted, text)
        return keyword_re.sub(_after_keyword, text)

    return rewrite_outside_literals(sql, _segment)


def reserved_word_hint(error: str, sql: str, aliases: Mapping[str, str]) -> Optional[str]:
    """Build a corrective hint for an engine error caused by a reserved name.

    The hint is produced only when the error text looks like a parse or
    lookup failure and the statement mentions one of the aliased names.
    """
    if not aliases or not _RESERVED_ERROR_RE.search(error):
        return None
    mentioned = [
        (name, alias)
        for name, alias in aliases.items()
        if re.search(rf"(?<!\w){re.escape(name)}(?!\w)", sql, flags=re.IGNORECASE)
    ]
    if not mentioned:
        return None
    parts = [
        f"'{name}' is a reserved word; query it as {alias} (e.g. SELECT * FROM {alias})"
        for name, alias in mentioned
    ]
    return "Hint: " + "; ".join(parts) + "."


def with_reserved_hint(error: str, sql: str, aliases: Mapping[str, str]) -> str:
    """Append ``reserved_word_hint`` to ``error`` when one applies."""
    hint = reserved_word_hint(error, sql, aliases)
    return f"{error}\n{hint}" if hint else error


__all__ = [
    "INTERNAL_PREFIX",
    "RESERVED_WORDS",
    "is_reserved",
    "internal_alias",
    "remap_reserved",
    "reserved_word_hint",
    "with_reserved_hint",
]
