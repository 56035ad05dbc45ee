from __future__ import annotations

import re
import warnings
from datetime import date, timedelta
from typing import Any

import pandas as pd

"""Field interpreters: typed values out of free-form export cells.

All functions are pure. Money falls back to 0, paid hours to None (absent),
and dates to None (row gets dropped by the record processor).
"""

__all__ = [
    "parse_money",
    "parse_paid_hours",
    "parse_date",
    "date_key",
    "get_monday",
    "month_key",
]

_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_NUMBER_WITH_THOUSANDS = re.compile(r"\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?")
# any number followed by "h": "4H", "4H30", "3.5 hours", "2 hrs"
_HOURS = re.compile(r"(\d+(?:\.\d+)?)\s*h", re.IGNORECASE)
_DMY = re.compile(r"(?<!\d)(\d{1,2})[/-](\d{1,2})[/-](\d{4}|\d{2})(?!\d)")
_HAS_YEAR = re.compile(r"\d{4}")

TWO_DIGIT_YEAR_PIVOT = 70


def parse_money(value: Any, *, allow_thousands: bool = False) -> float:
    """Read the first number in a cost cell.

    ``"$250.00 + GST"`` -> 250.0, ``"N/A"`` -> 0.0, non-text -> 0.0.
    A grouped number such as ``"1,234.56"`` reads as 1.0 unless
    ``allow_thousands`` is set.
    """
    if not isinstance(value, str) or value.strip().lower() == "n/a":
        return 0.0
    pattern = _NUMBER_WITH_THOUSANDS if allow_thousands else _NUMBER
    m = pattern.search(value)
    if not m:
        return 0.0
    return float(m.group(0).replace(",", ""))


def parse_paid_hours(value: Any) -> float | None:
    """Total paid hours in a notes-style cell, or None when there is no number.

    Every number carrying an hour suffix is summed (``"4H 3.5 hours"`` -> 7.5).
    Without any suffix the first bare number is used on its own, so
    ``"4 (A) 4.5 (B)"`` gives 4.0.
    """
    if not isinstance(value, str):
        return None
    suffixed = _HOURS.findall(value)
    if suffixed:
        return sum(float(n) for n in suffixed)
    m = _NUMBER.search(value)
    return float(m.group(0)) if m else None


def _parse_free_form(text: str) -> date | None:
    if not _HAS_YEAR.search(text):
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        ts = pd.to_datetime(text, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC")
    return ts.date()


def parse_date(value: Any) -> date | None:
    """Parse a job date as a UTC calendar date.

    Day-first ``D/M/Y`` or ``D-M-Y`` is tried first (two-digit years pivot at
    70: 69 -> 2069, 70 -> 1970), then free-form parsing.
    """
    text = str(value if value is not None else "").strip()
    if not text:
        return None
    m = _DMY.search(text)
    if m:
        day, month, year = int(m.group(1)), int(m.group(2)), m.group(3)
        y = int(year)
        if len(year) == 2:
            y += 1900 if y >= TWO_DIGIT_YEAR_PIVOT else 2000
        try:
            return date(y, month, day)
        except ValueError:
            pass
    return _parse_free_form(text)


def date_key(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def month_key(d: date) -> str:
    return d.strftime("%Y-%m")


def get_monday(d: date) -> date:
    """Monday on or before ``d`` (weeks start Monday)."""
    return d - timedelta(days=d.weekday())
