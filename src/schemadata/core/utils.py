"""Core utility functions shared across the package."""

from __future__ import annotations

import math
from typing import Any


def is_numeric(val: Any) -> bool:
    """Returns True if val can be converted to a finite-or-infinite float.

    ``"nan"`` is rejected: it parses, but it is not a number a sheet author
    meant to type.
    """
    try:
        return not math.isnan(float(val))
    except (TypeError, ValueError):
        return False


def cell_to_str(value: Any) -> str:
    """Coerce a decoded spreadsheet cell to a trimmed string.

    Missing cells (None, NaN) become the empty string; integral floats lose
    their ``.0`` so ``1.0`` reads back as ``"1"``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


__all__ = ["is_numeric", "cell_to_str"]
