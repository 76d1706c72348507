"""Quote-aware statement splitting and comment stripping."""

from __future__ import annotations

import re
from typing import List

_FROM_TABLE_RE = re.compile(r"\bFROM\s+([`\"]?)(\w+)\1", flags=re.IGNORECASE)


def split_statements(sql: str) -> List[str]:
    """Split ``;``-separated input into statements.

    A ``;`` inside a single-quoted or back-quoted span is not a boundary.
    Whitespace-only statements are dropped, and a trailing statement without
    a final ``;`` is kept. An unterminated quote keeps the rest of the input,
    including any ``;``, in the last statement.

    Examples:
        >>> split_statements("SELECT * FROM t WHERE x = 'a;b'; SELECT 2")
        ["SELECT * FROM t WHERE x = 'a;b'", 'SELECT 2']
    """
    statements: List[str] = []
    current: List[str] = []
    in_single = False
    in_back = False

    for ch in sql:
        if ch == "'" and not in_back:
            in_single = not in_single
        elif ch == "`" and not in_single:
            in_back = not in_back
        elif ch == ";" and not in_single and not in_back:
            stmt = "".join(current).strip()
            if stmt:
                statements.append(stmt)
            current = []
            continue
        current.append(ch)

    last = "".join(current).strip()
    if last:
        statements.append(last)
    return statements


def strip_comments(sql: str) -> str:
    """Remove ``-- line`` and ``/* block */`` comments outside quoted spans."""
    out: List[str] = []
    i = 0
    n = len(sql)
    in_single = False
    in_back = False
    while i < n:
        ch = sql[i]
        if not in_single and not in_back:
            if sql.startswith("--", i):
                end = sql.find("\n", i)
                i = n if end == -1 else end
                continue
            if sql.startswith("/*", i):
                end = sql.find("*/", i + 2)
                i = n if end == -1 else end + 2
                out.append(" ")
                continue
        if ch == "'" and not in_back:
            in_single = not in_single
        elif ch == "`" and not in_single:
            in_back = not in_back
        out.append(ch)
        i += 1
    return "".join(out)


def extract_table_name(sql: str) -> str:
    """Best-effort label for a statement: the first identifier after FROM.

    Falls back to the first 30 characters with whitespace collapsed.
    """
    m = _FROM_TABLE_RE.search(sql)
    if m:
        return m.group(2)
    return re.sub(r"\s+", " ", sql[:30])


__all__ = ["split_statements", "strip_comments", "extract_table_name"]
