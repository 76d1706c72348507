"""Identifier normalization for the embedded SQL engine.

Schema-domain queries use constructs the engine does not accept as written:
double-quoted identifiers, ``#``-prefixed column names (``#char_memo``) and
non-ASCII aliases. ``normalize_identifiers`` rewrites them into an equivalent
form. Single-quoted string literals are never touched.
"""

from __future__ import annotations

import re
from typing import Callable, List, Tuple

_DOUBLE_QUOTED_RE = re.compile(r'"([^"]+)"')
_BACKQUOTED_RE = re.compile(r"(`[^`]*`)")
_MARKER_IDENT_RE = re.compile(r"(?<![`\w])#(\w+)")
# Bare alias after AS; quoted aliases are left alone
_ALIAS_RE = re.compile(r"\s+AS\s+([^\s,;()`'\"\[\]]+)", flags=re.IGNORECASE)
_ENGINE_IDENT_RE = re.compile(r"^[A-Za-z0-9_]+$")


def split_literals(sql: str) -> List[Tuple[bool, str]]:
    """Split ``sql`` into ``(is_literal, text)`` segments.

    Literal segments are single-quoted spans including their quotes. An
    escaped quote (``''``) closes and reopens a span, which keeps it inside
    the literal. An unterminated literal runs to the end of the input.
    """
    segments: List[Tuple[bool, str]] = []
    buf = ""
    in_literal = False
    for ch in sql:
        if ch == "'":
            if in_literal:
                buf += ch
                segments.append((True, buf))
                buf = ""
                in_literal = False
                continue
            if buf:
                segments.append((False, buf))
            buf = ch
            in_literal = True
            continue
        buf += ch
    if buf:
        segments.append((in_literal, buf))
    return segments


def rewrite_outside_literals(sql: str, rewrite: Callable[[str], str]) -> str:
    """Apply ``rewrite`` to every part of ``sql`` outside string literals."""
    return "".join(
        text if is_literal else rewrite(text) for is_literal, text in split_literals(sql)
    )


def _drop_foreign_alias(match: re.Match) -> str:
    alias = match.group(1)
    if _ENGINE_IDENT_RE.match(alias):
        return match.group(0)
    return ""


def _normalize_segment(text: str) -> str:
    text = _DOUBLE_QUOTED_RE.sub(r"`\1`", text)
    # Odd indices are back-quoted spans, already legal identifiers
    parts = _BACKQUOTED_RE.split(text)
    for i in range(0, len(parts), 2):
        part = _MARKER_IDENT_RE.sub(r"`#\1`", parts[i])
        parts[i] = _ALIAS_RE.sub(_drop_foreign_alias, part)
    return "".join(parts)


def normalize_identifiers(sql: str) -> str:
    """Rewrite identifiers into a form the engine can parse.

    - ``"name"`` becomes ``` `name` ```
    - a bare ``#name`` becomes ``` `#name` ```
    - ``AS alias`` is dropped when the bare alias has characters outside
      ``[A-Za-z0-9_]``; the engine then names the output column itself

    The function is idempotent and never raises.

    Examples:
        >>> normalize_identifiers('SELECT c."#memo" FROM c')
        'SELECT c.`#memo` FROM c'
        >>> normalize_identifiers("SELECT s.#name FROM s")
        'SELECT s.`#name` FROM s'
        >>> normalize_identifiers("SELECT name AS 이름 FROM t")
        'SELECT name FROM t'
    """
    return rewrite_outside_literals(sql, _normalize_segment)


__all__ = ["normalize_identifiers", "split_literals", "rewrite_outside_literals"]
