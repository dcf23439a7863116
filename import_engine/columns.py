"""
import_engine.columns - Find a cell by any of its accepted header names.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

from import_engine.report import RawRow

_WS_RE = re.compile(r"\s+")


def header_key(header: str) -> str:
    """Comparison key for headers: lower-case, all whitespace removed."""
    return _WS_RE.sub("", str(header)).lower()


def resolve(row: RawRow, candidates: Iterable[str]) -> Any:
    """
    Return the value of the first candidate header present in ``row``.

    Each candidate is tried as an exact key first, then against every key
    of the row by header_key (case and whitespace ignored).  Empty (None)
    cells count as absent.
    Returns None when nothing matches.
    """
    for name in candidates:
        value = row.get(name)
        if value is not None:
            return value

        wanted = header_key(name)
        for key, value in row.items():
            if value is not None and header_key(key) == wanted:
                return value
    return None
