from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ..models.config_models import PayoutRules, Thresholds
from ..models.job import ProcessedJob
from ..models.metrics import (
    DayActivity,
    EmployeeEarnings,
    HourlyPerformance,
    MetricsSet,
    PerJobPerformance,
    PeriodRevenue,
    SummaryBadges,
    WorkloadCell,
)
from .interpreters import date_key, get_monday, month_key

"""Aggregation engine: processed jobs -> dashboard rollups.

Jobs are flattened into two frames, one row per job and one row per
(job, listed employee), and every rollup is a pandas group-by over one of
them. Rankings break ties on the key (date or employee name, ascending) so
the output does not depend on the order of the input rows.
"""

__all__ = [
    "busiest_days",
    "compute_metrics",
    "hourly_performance",
    "monthly_revenue",
    "per_job_performance",
    "summary_badges",
    "top_employees",
    "weekly_revenue",
    "workload_matrix",
]

JOB_COLUMNS = ["date_key", "week", "month", "value", "paid_hours", "is_billable"]
STAFF_COLUMNS = ["employee", "week", "value", "payout", "paid_hours", "is_billable"]


def _jobs_frame(jobs: Sequence[ProcessedJob]) -> pd.DataFrame:
    records = [
        {
            "date_key": j.date_key,
            "week": date_key(get_monday(j.date)),
            "month": month_key(j.date),
            "value": j.value,
            "paid_hours": j.paid_hours,
            "is_billable": j.is_billable,
        }
        for j in jobs
    ]
    return pd.DataFrame.from_records(records, columns=JOB_COLUMNS)


def _staff_frame(jobs: Sequence[ProcessedJob]) -> pd.DataFrame:
    """One row per listed employee per job (a name listed twice appears twice)."""
    records = [
        {
            "employee": name,
            "week": date_key(get_monday(j.date)),
            "value": j.value,
            "payout": j.payout_for(name),
            "paid_hours": j.paid_hours,
            "is_billable": j.is_billable,
        }
        for j in jobs
        for name in j.employees
    ]
    frame = pd.DataFrame.from_records(records, columns=STAFF_COLUMNS)
    # None -> NaN so sums skip absent hours
    frame["paid_hours"] = pd.to_numeric(frame["paid_hours"], errors="coerce")
    return frame


def _billable(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame["is_billable"].astype(bool)]


def _revenue_by(jobs: Sequence[ProcessedJob], key: str) -> tuple[PeriodRevenue, ...]:
    billable = _billable(_jobs_frame(jobs))
    if billable.empty:
        return ()
    totals = billable.groupby(key)["value"].sum().sort_index()
    return tuple(PeriodRevenue(period=str(k), revenue=float(v)) for k, v in totals.items())


def weekly_revenue(jobs: Sequence[ProcessedJob]) -> tuple[PeriodRevenue, ...]:
    """Billable revenue per week (keyed by the Monday), oldest first."""
    return _revenue_by(jobs, "week")


def monthly_revenue(jobs: Sequence[ProcessedJob]) -> tuple[PeriodRevenue, ...]:
    """Billable revenue per calendar month ("YYYY-MM"), oldest first."""
    return _revenue_by(jobs, "month")


def busiest_days(jobs: Sequence[ProcessedJob], top_n: int = 10) -> tuple[DayActivity, ...]:
    billable = _billable(_jobs_frame(jobs))
    if billable.empty:
        return ()
    daily = (
        billable.groupby("date_key")
        .agg(jobs=("value", "size"), revenue=("value", "sum"))
        .reset_index()
        .sort_values(["revenue", "date_key"], ascending=[False, True])
        .head(top_n)
    )
    return tuple(
        DayActivity(date_key=r.date_key, jobs=int(r.jobs), revenue=float(r.revenue))
        for r in daily.itertuples(index=False)
    )


def top_employees(jobs: Sequence[ProcessedJob], top_n: int = 10) -> tuple[EmployeeEarnings, ...]:
    """Employees ranked by summed payouts over billable jobs."""
    billable = _billable(_staff_frame(jobs))
    if billable.empty:
        return ()
    earnings = (
        billable.groupby("employee")["payout"].sum()
        .reset_index()
        .sort_values(["payout", "employee"], ascending=[False, True])
        .head(top_n)
    )
    return tuple(
        EmployeeEarnings(employee=r.employee, earnings=float(r.payout))
        for r in earnings.itertuples(index=False)
    )


def hourly_performance(
    jobs: Sequence[ProcessedJob],
    rules: PayoutRules,
    min_jobs: int = 5,
    top_n: int = 10,
) -> tuple[HourlyPerformance, ...]:
    """Billable revenue per paid hour for hourly staff.

    Only jobs with a paid-hours value count towards ``min_jobs``. Staff on the
    non-hourly list are left out entirely.
    """
    staff = _staff_frame(jobs)
    staff = staff[~staff["employee"].map(rules.is_non_hourly).astype(bool)]
    if staff.empty:
        return ()
    staff = staff.assign(
        has_hours=staff["paid_hours"].notna(),
        revenue=staff["value"].where(staff["is_billable"].astype(bool), 0.0),
    )
    grouped = staff.groupby("employee").agg(
        jobs_with_paid_hours=("has_hours", "sum"),
        paid_hours=("paid_hours", "sum"),
        revenue=("revenue", "sum"),
    ).reset_index()
    grouped = grouped[grouped["jobs_with_paid_hours"] >= min_jobs]
    if grouped.empty:
        return ()
    grouped = grouped.assign(
        per_hour=(grouped["revenue"] / grouped["paid_hours"]).where(grouped["paid_hours"] > 0, 0.0)
    )
    ranked = grouped.sort_values(["per_hour", "employee"], ascending=[False, True]).head(top_n)
    return tuple(
        HourlyPerformance(
            employee=r.employee,
            jobs_with_paid_hours=int(r.jobs_with_paid_hours),
            paid_hours=float(r.paid_hours),
            revenue=float(r.revenue),
            per_hour=float(r.per_hour),
        )
        for r in ranked.itertuples(index=False)
    )


def per_job_performance(
    jobs: Sequence[ProcessedJob], min_jobs: int = 5
) -> tuple[PerJobPerformance, ...]:
    """Average payout per billable job, for staff with at least ``min_jobs``."""
    billable = _billable(_staff_frame(jobs))
    if billable.empty:
        return ()
    grouped = billable.groupby("employee").agg(
        paid_jobs=("payout", "size"),
        revenue=("payout", "sum"),
    ).reset_index()
    grouped = grouped[grouped["paid_jobs"] >= min_jobs]
    if grouped.empty:
        return ()
    grouped = grouped.assign(per_job=grouped["revenue"] / grouped["paid_jobs"])
    ranked = grouped.sort_values(["per_job", "employee"], ascending=[False, True])
    return tuple(
        PerJobPerformance(
            employee=r.employee,
            paid_jobs=int(r.paid_jobs),
            revenue=float(r.revenue),
            per_job=float(r.per_job),
        )
        for r in ranked.itertuples(index=False)
    )


def workload_matrix(
    jobs: Sequence[ProcessedJob], rules: PayoutRules
) -> tuple[WorkloadCell, ...]:
    """Week x employee load: 1 per job for fixed-rate staff, paid hours otherwise.

    Increments of zero (no hours recorded) never create a cell.
    """
    staff = _staff_frame(jobs)
    if staff.empty:
        return ()
    fixed = staff["employee"].isin(rules.fixed_rate_employees)
    staff = staff.assign(load=staff["paid_hours"].fillna(0.0).where(~fixed, 1.0))
    staff = staff[staff["load"] != 0]
    if staff.empty:
        return ()
    cells = staff.groupby(["week", "employee"])["load"].sum().sort_index()
    return tuple(
        WorkloadCell(week=str(week), employee=str(name), load=float(load))
        for (week, name), load in cells.items()
    )


def summary_badges(jobs: Sequence[ProcessedJob]) -> SummaryBadges:
    billable = [j for j in jobs if j.is_billable]
    return SummaryBadges(
        total_jobs=len(jobs),
        billable_jobs=len(billable),
        total_revenue=float(sum(j.value for j in billable)),
        total_paid_hours=float(sum(j.paid_hours or 0.0 for j in jobs)),
        last_updated=max((j.date for j in jobs), default=None),
    )


def compute_metrics(
    jobs: Sequence[ProcessedJob],
    rules: PayoutRules | None = None,
    thresholds: Thresholds | None = None,
) -> MetricsSet:
    """Compute every rollup over one processed job sequence."""
    rules = rules or PayoutRules()
    thresholds = thresholds or Thresholds()
    return MetricsSet(
        summary=summary_badges(jobs),
        weekly_revenue=weekly_revenue(jobs),
        monthly_revenue=monthly_revenue(jobs),
        busiest_days=busiest_days(jobs, thresholds.top_n),
        top_employees=top_employees(jobs, thresholds.top_n),
        hourly_performance=hourly_performance(
            jobs, rules, thresholds.min_jobs, thresholds.top_n
        ),
        per_job_performance=per_job_performance(jobs, thresholds.min_jobs),
        workload=workload_matrix(jobs, rules),
    )
