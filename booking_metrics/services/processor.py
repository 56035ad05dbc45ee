from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from ..models.config_models import PayoutRules
from ..models.job import ProcessedJob
from .interpreters import date_key, parse_date, parse_money, parse_paid_hours

"""Record processor: one canonical row in, one ProcessedJob (or None) out.

Payout allocation is an ordered list of rules. Each rule looks at the job's
employees, claims the names it pays, and never touches a name an earlier rule
already claimed:

1. subcontractor -> 50% of the job value
2. fixed-rate staff -> 50% when alone on the job, 25% each when two or more
3. everyone else -> the full job value each (not split)

Rule 3 means payouts on a job can add up to more than the job value.
"""

__all__ = [
    "ProcessedBatch",
    "allocate_payouts",
    "process_row",
    "process_rows",
    "split_employees",
]

logger = logging.getLogger(__name__)

SUBCONTRACTOR_SHARE = 0.5
FIXED_RATE_SOLE_SHARE = 0.5
FIXED_RATE_SHARED_SHARE = 0.25


@dataclass(frozen=True)
class ProcessedBatch:
    jobs: tuple[ProcessedJob, ...]
    dropped_rows: int  # rows without a usable date
    last_updated: date | None  # latest job date


def split_employees(raw: str) -> tuple[str, ...]:
    """Comma-separated staff cell -> trimmed names (order and duplicates kept)."""
    return tuple(name.strip() for name in raw.split(",") if name.strip())


def _subcontractor_rule(
    employees: Sequence[str], value: float, rules: PayoutRules, claimed: dict[str, float]
) -> None:
    if rules.subcontractor in employees:
        claimed[rules.subcontractor] = value * SUBCONTRACTOR_SHARE


def _fixed_rate_rule(
    employees: Sequence[str], value: float, rules: PayoutRules, claimed: dict[str, float]
) -> None:
    present = [
        n for n in dict.fromkeys(employees)
        if n in rules.fixed_rate_employees and n not in claimed
    ]
    if not present:
        return
    share = FIXED_RATE_SOLE_SHARE if len(present) == 1 else FIXED_RATE_SHARED_SHARE
    for name in present:
        claimed[name] = value * share


def _full_value_rule(
    employees: Sequence[str], value: float, rules: PayoutRules, claimed: dict[str, float]
) -> None:
    for name in employees:
        if name not in claimed:
            claimed[name] = value


PAYOUT_RULES: tuple[Callable[[Sequence[str], float, PayoutRules, dict[str, float]], None], ...] = (
    _subcontractor_rule,
    _fixed_rate_rule,
    _full_value_rule,
)


def allocate_payouts(
    employees: Sequence[str], value: float, rules: PayoutRules
) -> dict[str, float]:
    """Apply the payout rules in order and return name -> amount."""
    claimed: dict[str, float] = {}
    for rule in PAYOUT_RULES:
        rule(employees, value, rules, claimed)
    return claimed


def process_row(
    row: Mapping[str, str], rules: PayoutRules, *, allow_thousands: bool = False
) -> ProcessedJob | None:
    """Build a ProcessedJob from a canonical row; None when the date is unusable."""
    job_date = parse_date(row.get("Date"))
    if job_date is None:
        return None

    booking_name = str(row.get("Booking Name") or "").strip()
    cost_raw = str(row.get("Cost") or "")
    employees = split_employees(str(row.get("Employees") or ""))
    value = parse_money(cost_raw, allow_thousands=allow_thousands)

    name_lower = booking_name.lower()
    is_cancelled = "cancelled" in name_lower
    is_touch_up = "touch up" in name_lower

    return ProcessedJob(
        date=job_date,
        date_key=date_key(job_date),
        booking_name=booking_name,
        employees=employees,
        value=value,
        paid_hours=parse_paid_hours(str(row.get("Hours Paid Out") or "")),
        is_cancelled=is_cancelled,
        is_touch_up=is_touch_up,
        has_gst="+ gst" in cost_raw.lower(),
        is_billable=value > 0 and not is_cancelled and not is_touch_up,
        employee_payouts=allocate_payouts(employees, value, rules),
    )


def process_rows(
    rows: Iterable[Mapping[str, str]],
    rules: PayoutRules,
    *,
    allow_thousands: bool = False,
    on_row: Callable[[], None] | None = None,
) -> ProcessedBatch:
    """Process every row, dropping those whose date cannot be resolved.

    Args:
        rows: Canonical rows in source order
        rules: Payout roster
        allow_thousands: Read comma-grouped money values whole
        on_row: Optional callback invoked once per input row (progress)
    """
    jobs: list[ProcessedJob] = []
    dropped = 0
    for row in rows:
        job = process_row(row, rules, allow_thousands=allow_thousands)
        if job is None:
            dropped += 1
        else:
            jobs.append(job)
        if on_row is not None:
            on_row()
    if dropped:
        logger.debug(f"dropped {dropped} rows without a usable date")
    last_updated = max((j.date for j in jobs), default=None)
    return ProcessedBatch(jobs=tuple(jobs), dropped_rows=dropped, last_updated=last_updated)
