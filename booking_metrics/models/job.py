from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType

"""ProcessedJob model.

One ProcessedJob is produced per export row whose date could be resolved.
Instances are frozen and their payout mapping is read-only, so aggregation
code can share them freely.
"""

__all__ = [
    "CANONICAL_FIELDS",
    "ProcessedJob",
]

# Column names every stage after the header canonicalizer works with
CANONICAL_FIELDS = ("Date", "Booking Name", "Employees", "Cost", "Hours Paid Out")


@dataclass(frozen=True)
class ProcessedJob:
    """Typed, classified job record.

    paid_hours is None when the hours cell held no number at all; 0.0 means
    the cell explicitly said zero hours.
    """
    date: date  # calendar date (UTC)
    date_key: str  # "YYYY-MM-DD"
    booking_name: str
    employees: tuple[str, ...]  # source order, duplicates kept
    value: float
    paid_hours: float | None
    is_cancelled: bool
    is_touch_up: bool
    has_gst: bool
    is_billable: bool
    employee_payouts: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        stray = set(self.employee_payouts) - set(self.employees)
        if stray:
            raise ValueError(f"payouts for employees not on job: {sorted(stray)}")
        # read-only view so the frozen job cannot be mutated through its mapping
        object.__setattr__(
            self, "employee_payouts", MappingProxyType(dict(self.employee_payouts))
        )

    @property
    def has_paid_hours(self) -> bool:
        return self.paid_hours is not None

    def payout_for(self, employee: str) -> float:
        return self.employee_payouts.get(employee, 0.0)
