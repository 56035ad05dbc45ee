from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

"""Aggregate result models.

Each rollup is a tuple of small frozen rows so the rendering layer can iterate
them in their final, already-sorted order. ``MetricsSet.to_dict`` gives the
JSON-ready form used by ``--json``.
"""

__all__ = [
    "PeriodRevenue",
    "DayActivity",
    "EmployeeEarnings",
    "HourlyPerformance",
    "PerJobPerformance",
    "WorkloadCell",
    "SummaryBadges",
    "MetricsSet",
]


@dataclass(frozen=True)
class PeriodRevenue:
    period: str  # "YYYY-MM-DD" (week start) or "YYYY-MM" (month)
    revenue: float


@dataclass(frozen=True)
class DayActivity:
    date_key: str
    jobs: int
    revenue: float


@dataclass(frozen=True)
class EmployeeEarnings:
    employee: str
    earnings: float


@dataclass(frozen=True)
class HourlyPerformance:
    employee: str
    jobs_with_paid_hours: int
    paid_hours: float
    revenue: float
    per_hour: float


@dataclass(frozen=True)
class PerJobPerformance:
    employee: str
    paid_jobs: int
    revenue: float
    per_job: float


@dataclass(frozen=True)
class WorkloadCell:
    week: str  # Monday, "YYYY-MM-DD"
    employee: str
    load: float  # job count for fixed-rate staff, paid hours otherwise


@dataclass(frozen=True)
class SummaryBadges:
    total_jobs: int
    billable_jobs: int
    total_revenue: float
    total_paid_hours: float
    last_updated: date | None


@dataclass(frozen=True)
class MetricsSet:
    """All rollups computed from one processed job sequence."""
    summary: SummaryBadges
    weekly_revenue: tuple[PeriodRevenue, ...]
    monthly_revenue: tuple[PeriodRevenue, ...]
    busiest_days: tuple[DayActivity, ...]
    top_employees: tuple[EmployeeEarnings, ...]
    hourly_performance: tuple[HourlyPerformance, ...]
    per_job_performance: tuple[PerJobPerformance, ...]
    workload: tuple[WorkloadCell, ...]

    def to_dict(self) -> dict[str, Any]:
        def rows(items: tuple[Any, ...]) -> list[dict[str, Any]]:
            return [dict(vars(i)) for i in items]

        last = self.summary.last_updated
        return {
            "summary": {
                "total_jobs": self.summary.total_jobs,
                "billable_jobs": self.summary.billable_jobs,
                "total_revenue": self.summary.total_revenue,
                "total_paid_hours": self.summary.total_paid_hours,
                "last_updated": last.isoformat() if last else None,
            },
            "weekly_revenue": rows(self.weekly_revenue),
            "monthly_revenue": rows(self.monthly_revenue),
            "busiest_days": rows(self.busiest_days),
            "top_employees": rows(self.top_employees),
            "hourly_performance": rows(self.hourly_performance),
            "per_job_performance": rows(self.per_job_performance),
            "workload": rows(self.workload),
        }
