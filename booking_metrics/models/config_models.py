from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the booking metrics pipeline.

These are the typed, immutable forms of ``config/dashboard.yml`` after
validation by ``booking_metrics.config.loader``. The payout rule names are
business constants; they are kept in config so the roster can change without
a code release.
"""

__all__ = [
    "DEFAULT_SUBCONTRACTOR",
    "DEFAULT_FIXED_RATE_EMPLOYEES",
    "PayoutRules",
    "Thresholds",
    "DashboardConfig",
    "normalize_name",
]

DEFAULT_SUBCONTRACTOR = "Uppal/Dhruv"
DEFAULT_FIXED_RATE_EMPLOYEES = frozenset({"Jasmine", "Mitchell", "Priya"})


def normalize_name(name: str) -> str:
    """Lower-case and collapse whitespace for case/space-insensitive name matching."""
    return " ".join(name.split()).lower()


@dataclass(frozen=True)
class PayoutRules:
    """Who is paid what share of a job.

    - subcontractor: exact employee name paid 50% of the job value
    - fixed_rate_employees: names paid 50% (alone) or 25% each (two or more)
    - non_hourly_employees: names excluded from hourly performance; matched
      case/whitespace-insensitively
    """
    subcontractor: str = DEFAULT_SUBCONTRACTOR
    fixed_rate_employees: frozenset[str] = DEFAULT_FIXED_RATE_EMPLOYEES
    non_hourly_employees: frozenset[str] | None = None  # None -> subcontractor + fixed-rate

    @property
    def non_hourly_keys(self) -> frozenset[str]:
        names = self.non_hourly_employees
        if names is None:
            names = self.fixed_rate_employees | {self.subcontractor}
        return frozenset(normalize_name(n) for n in names)

    def is_non_hourly(self, employee: str) -> bool:
        return normalize_name(employee) in self.non_hourly_keys


@dataclass(frozen=True)
class Thresholds:
    """Leaderboard cut-offs."""
    min_jobs: int = 5  # minimum qualifying jobs for hourly / per-job rankings
    top_n: int = 10  # cap for top-N lists


@dataclass(frozen=True)
class DashboardConfig:
    """Root configuration object for one pipeline run."""
    source: str  # URL or local path of the export
    timezone: str = "UTC"  # display timezone for dates in the SUMMARY line
    payouts: PayoutRules = field(default_factory=PayoutRules)
    thresholds: Thresholds = field(default_factory=Thresholds)
    thousands_separators: bool = False  # read "1,234.56" as 1234.56 instead of 1
    fetch_timeout_seconds: float = 30.0
