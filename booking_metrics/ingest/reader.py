from __future__ import annotations

import csv
import io
import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from ..logging.init import log_parse_diagnostics
from ..models.diagnostics import ParseDiagnostics
from ..models.job import CANONICAL_FIELDS
from .headers import canonicalize_row

"""Delimiter-detecting export reader with ragged-row recovery.

Steps (each one only when the previous left nothing usable):
1. Detect the delimiter among comma, tab, semicolon and pipe, then read with
   the first non-blank line as header. Rows whose width differs from the
   header are recorded as field-count mismatches.
2. Zero rows and a tab on the first line: read again forcing tab.
3. Any field-count mismatch: read again as plain arrays, take the most common
   body row length as the real width, trim/pad the header and every row to
   that width, and rebuild the records positionally.
4. Canonicalize every key of every row.

Typical cause of step 3 is a trailing "Notes" header that only some rows fill.
"""

__all__ = [
    "DELIMITER_CANDIDATES",
    "EmptyExportError",
    "ParseError",
    "ParsedExport",
    "detect_delimiter",
    "dominant_length",
    "parse_export",
]

logger = logging.getLogger(__name__)

DELIMITER_CANDIDATES = (",", "\t", ";", "|")
SNIFF_SAMPLE_LINES = 50
FORCED_TAB_LABEL = "\\t"


class ParseError(Exception):
    """Raised when the export text cannot be turned into rows."""


class EmptyExportError(ParseError):
    """Raised when every parse strategy yields zero rows."""


@dataclass(frozen=True)
class ParsedExport:
    rows: tuple[dict[str, str], ...]  # canonical rows, source order
    diagnostics: ParseDiagnostics


def _is_blank(row: Sequence[str]) -> bool:
    return all(not cell.strip() for cell in row)


def detect_delimiter(text: str) -> str:
    """Guess the delimiter from a sample of the non-blank lines.

    csv.Sniffer is tried first; if it cannot decide, the candidate that occurs
    most often on the first non-blank line wins. Defaults to comma.
    """
    lines = [ln for ln in text.splitlines() if ln.strip()][:SNIFF_SAMPLE_LINES]
    if not lines:
        return ","
    try:
        dialect = csv.Sniffer().sniff("\n".join(lines), delimiters="".join(DELIMITER_CANDIDATES))
        return dialect.delimiter
    except csv.Error:
        pass
    best, best_count = ",", 0
    for candidate in DELIMITER_CANDIDATES:
        count = lines[0].count(candidate)
        if count > best_count:
            best, best_count = candidate, count
    return best


def _read_arrays(text: str, delimiter: str) -> list[list[str]]:
    """Read text into arrays of cells, dropping blank lines."""
    try:
        # newline=None folds lone \r (old Mac exports) and \r\n into \n
        reader = csv.reader(io.StringIO(text, newline=None), delimiter=delimiter)
        return [r for r in reader if not _is_blank(r)]
    except csv.Error as e:
        raise ParseError(f"unreadable export: {e}") from e


def _parse_with_header(text: str, delimiter: str) -> tuple[list[dict[str, str]], int]:
    """Header-row parse. Returns (rows, number of field-count mismatches)."""
    arrays = _read_arrays(text, delimiter)
    if not arrays:
        return [], 0
    header, body = arrays[0], arrays[1:]
    mismatches = 0
    rows: list[dict[str, str]] = []
    for raw in body:
        if len(raw) != len(header):
            mismatches += 1
        rows.append(dict(zip(header, raw)))
    return rows, mismatches


def dominant_length(rows: Sequence[Sequence[str]]) -> int:
    """Most frequent row length; ties go to the length seen first."""
    counts = Counter(len(r) for r in rows)
    # max() keeps the first of equal counts, and Counter keeps insertion order
    return max(counts.items(), key=lambda kv: kv[1])[0]


def _fit(row: Sequence[str], width: int) -> list[str]:
    return list(row[:width]) + [""] * (width - len(row))


def _recover_ragged(text: str) -> tuple[list[dict[str, str]], str, int]:
    """Array-based re-read used when header widths and row widths disagree.

    Returns:
        (rows, delimiter, dominant width)
    """
    delimiter = detect_delimiter(text)
    arrays = _read_arrays(text, delimiter)
    if not arrays:
        return [], delimiter, 0
    header, body = [h.strip() for h in arrays[0]], arrays[1:]
    width = dominant_length(body) if body else len(header)
    if len(header) > width:
        logger.debug(f"dropping surplus header columns: {header[width:]}")
    header = header[:width] + [f"Col{i}" for i in range(len(header), width)]
    rows = [dict(zip(header, _fit(raw, width))) for raw in body]
    return rows, delimiter, width


def _missing_field_warning(rows: Sequence[dict[str, str]]) -> str | None:
    missing: set[str] = set()
    affected = 0
    for row in rows:
        absent = [f for f in CANONICAL_FIELDS if f not in row]
        if absent:
            affected += 1
            missing.update(absent)
    if not affected:
        return None
    names = ", ".join(f for f in CANONICAL_FIELDS if f in missing)
    return f"{affected} rows missing expected fields: {names}"


def parse_export(text: str) -> ParsedExport:
    """Turn raw export text into canonical rows plus diagnostics.

    Raises:
        ParseError: If the text cannot be tokenized at all
        EmptyExportError: If no strategy produces a single row
    """
    text = text.removeprefix("\ufeff")
    warnings: list[str] = []
    recovered = False

    delimiter = detect_delimiter(text)
    label = delimiter
    rows, mismatches = _parse_with_header(text, delimiter)

    first_line = next(iter(text.splitlines()), "")
    if not rows and "\t" in first_line:
        rows, mismatches = _parse_with_header(text, "\t")
        label = FORCED_TAB_LABEL

    if mismatches:
        rows, delimiter, width = _recover_ragged(text)
        if not (label == FORCED_TAB_LABEL and delimiter == "\t"):
            label = delimiter
        recovered = True
        warnings.append(
            f"{mismatches} rows had a field-count mismatch; "
            f"rebuilt {len(rows)} rows using dominant row length {width}"
        )

    canonical = tuple(canonicalize_row(r) for r in rows)
    if not canonical:
        raise EmptyExportError(
            "No rows parsed from export. Check header names and delimiter. "
            f"Expected headers: {', '.join(CANONICAL_FIELDS)}"
        )

    missing = _missing_field_warning(canonical)
    if missing:
        warnings.append(missing)

    diagnostics = ParseDiagnostics(
        row_count=len(canonical),
        delimiter=label,
        warnings=tuple(warnings),
        recovered=recovered,
        columns=tuple(canonical[0].keys()),
    )
    log_parse_diagnostics(diagnostics, logger)
    return ParsedExport(rows=canonical, diagnostics=diagnostics)
