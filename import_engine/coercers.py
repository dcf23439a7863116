"""
import_engine.coercers - Turn raw cell values into typed report values.

Pure functions; nothing here touches the database.
"""

from __future__ import annotations

import re
from typing import Any

from import_engine.errors import InvalidMonthError, InvalidYearError

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

TRUE_WORDS  = frozenset({"yes", "true", "1", "y"})
FALSE_WORDS = frozenset({"no", "false", "0", "n"})

# Leading base-10 integer, as spreadsheet users type it ("12", "+3", "7.9", "4 doses")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _leading_int(text: str) -> int | None:
    m = _LEADING_INT_RE.match(text)
    return int(m.group(1)) if m else None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def to_numeric(value: Any) -> int | float | None:
    """
    None / blank → None.  Numbers pass through unchanged.
    Text is read as a leading base-10 integer; anything else → None
    (missing, never zero).
    """
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return _leading_int(str(value))


def to_boolean(value: Any, default: bool) -> bool:
    """Yes/no style cell → bool; blank or unrecognised → ``default``."""
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0

    word = str(value).strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    return default


def month_number(month: Any) -> int:
    """
    1-12 from a number or an English month name (full or partial).

    Raises InvalidMonthError.
    """
    text = str(month).strip()
    if not text:
        raise InvalidMonthError("Invalid month: (blank)")

    num = _leading_int(text)
    if num is not None and 1 <= num <= 12:
        return num

    lowered = text.lower()
    if num is None:
        for idx, name in enumerate(MONTH_NAMES, start=1):
            if lowered in name or name in lowered:
                return idx

    raise InvalidMonthError(f"Invalid month: {text}")


def expand_year(year: Any) -> int:
    """Integer year; two-digit years pivot at 50 (23 → 2023, 99 → 1999)."""
    num = _leading_int(str(year))
    if num is None or num < 0:
        raise InvalidYearError(f"Invalid year: {str(year).strip()}")
    if 0 <= num < 100:
        num = 2000 + num if num < 50 else 1900 + num
    return num


def to_report_month(year: Any, month: Any) -> str:
    """Return the first-of-month date string ``YYYY-MM-01``."""
    mm = month_number(month)
    yyyy = expand_year(year)
    return f"{yyyy:04d}-{mm:02d}-01"
