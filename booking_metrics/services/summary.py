from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from .pipeline import PipelineResult

"""SUMMARY line rendering.

Format:
SUMMARY rows={parsed} jobs={processed} billable={billable} dropped={dropped}
revenue={total billable revenue, 2dp} paid_hours={total, 1dp}
delimiter={delimiter} last_updated={YYYY-MM-DD or -}
"""

__all__ = [
    "format_delimiter",
    "format_local_date",
    "render_summary_line",
]

_DELIMITER_NAMES = {"\t": "\\t", " ": "space"}


def format_delimiter(delimiter: str) -> str:
    return _DELIMITER_NAMES.get(delimiter, delimiter)


def format_local_date(d: date | None, timezone: str = "UTC") -> str:
    """Render a UTC calendar date as seen in ``timezone`` (``-`` when absent).

    Job dates are UTC midnight, so zones west of UTC show the previous day.
    """
    if d is None:
        return "-"
    midnight = datetime(d.year, d.month, d.day, tzinfo=UTC)
    return midnight.astimezone(ZoneInfo(timezone)).date().isoformat()


def render_summary_line(result: PipelineResult, timezone: str = "UTC") -> str:
    """Render the SUMMARY line for one pipeline run.

    Example output::

        SUMMARY rows=12 jobs=11 billable=9 dropped=1 revenue=2450.00 paid_hours=31.5 delimiter=, last_updated=2024-03-08
    """
    s = result.metrics.summary
    return (
        f"SUMMARY rows={result.diagnostics.row_count} "
        f"jobs={s.total_jobs} "
        f"billable={s.billable_jobs} "
        f"dropped={result.dropped_rows} "
        f"revenue={s.total_revenue:.2f} "
        f"paid_hours={s.total_paid_hours:.1f} "
        f"delimiter={format_delimiter(result.diagnostics.delimiter)} "
        f"last_updated={format_local_date(s.last_updated, timezone)}"
    )
