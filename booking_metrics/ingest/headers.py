from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

"""Header canonicalization.

Exports come from several tools and hand-edited spreadsheets, so the same
column shows up as "Staff", "Employee(s)", "employees " or "\\ufeffDate".
Every header is reduced to a lower-case, space-separated key and looked up in
a synonym table; unknown headers pass through untouched (apart from trimming
and BOM removal).
"""

__all__ = [
    "HEADER_SYNONYMS",
    "canonicalize_header",
    "canonicalize_row",
    "normalize_header_key",
]

HEADER_SYNONYMS: Mapping[str, str] = MappingProxyType({
    "date": "Date",
    "booking name": "Booking Name",
    "booking": "Booking Name",
    "name": "Booking Name",
    "employees": "Employees",
    "employee s": "Employees",
    "employee": "Employees",
    "staff": "Employees",
    "cost": "Cost",
    "amount": "Cost",
    "value": "Cost",
    "hours paid out": "Hours Paid Out",
    "hours": "Hours Paid Out",
    "paid hours": "Hours Paid Out",
})

_BOM = "\ufeff"
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def _strip_header(header: str) -> str:
    if header.startswith(_BOM):
        header = header[len(_BOM):]
    return header.strip()


def normalize_header_key(header: str) -> str:
    """Reduce a header to its lookup key ("Employee(s)" -> "employee s")."""
    lowered = _strip_header(header).lower()
    return " ".join(_NON_ALNUM.sub(" ", lowered).split())


def canonicalize_header(header: Any) -> Any:
    """Map a header to its canonical field name.

    Non-string headers are returned as-is. Canonical names map to themselves,
    so applying this twice gives the same result as applying it once.
    """
    if not isinstance(header, str):
        return header
    return HEADER_SYNONYMS.get(normalize_header_key(header), _strip_header(header))


def canonicalize_row(row: Mapping[Any, str]) -> dict[Any, str]:
    """Return a new row with every key canonicalized (later duplicates win)."""
    return {canonicalize_header(k): v for k, v in row.items()}
