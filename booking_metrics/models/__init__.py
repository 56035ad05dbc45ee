"""Domain models for the booking metrics pipeline.

This package contains the immutable records passed between pipeline stages:
processed jobs, parse diagnostics, aggregate rollups and run configuration.
"""

from .config_models import DashboardConfig, PayoutRules, Thresholds
from .diagnostics import ParseDiagnostics
from .job import CANONICAL_FIELDS, ProcessedJob
from .metrics import (
    DayActivity,
    EmployeeEarnings,
    HourlyPerformance,
    MetricsSet,
    PerJobPerformance,
    PeriodRevenue,
    SummaryBadges,
    WorkloadCell,
)

__all__ = [
    # Configuration models
    "DashboardConfig",
    "PayoutRules",
    "Thresholds",
    # Pipeline records
    "CANONICAL_FIELDS",
    "ParseDiagnostics",
    "ProcessedJob",
    # Rollups
    "DayActivity",
    "EmployeeEarnings",
    "HourlyPerformance",
    "MetricsSet",
    "PerJobPerformance",
    "PeriodRevenue",
    "SummaryBadges",
    "WorkloadCell",
]
