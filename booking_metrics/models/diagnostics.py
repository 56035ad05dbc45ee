from __future__ import annotations

from dataclasses import dataclass

"""ParseDiagnostics model.

Produced once per load by the export reader and read by whatever displays the
load status (the CLI SUMMARY line, or a dashboard banner).
"""

__all__ = [
    "ParseDiagnostics",
]


@dataclass(frozen=True)
class ParseDiagnostics:
    row_count: int  # canonical rows handed to the record processor
    delimiter: str  # display form; a forced tab is the literal "\\t"
    warnings: tuple[str, ...] = ()
    recovered: bool = False  # ragged-row recovery path was used
    columns: tuple[str, ...] = ()  # canonical keys of the first row

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)
