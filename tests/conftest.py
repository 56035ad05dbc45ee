# Shared pytest fixtures
from __future__ import annotations

import os
import tempfile
from datetime import date
from pathlib import Path

import pytest

from booking_metrics.logging.init import reset_logging
from booking_metrics.models.config_models import PayoutRules
from booking_metrics.models.job import ProcessedJob
from booking_metrics.services.interpreters import date_key
from booking_metrics.services.processor import allocate_payouts

SAMPLE_EXPORT = (
    "\ufeffDate,Booking,Staff,Amount,Paid Hours\n"
    '4/3/2024,Kitchen clean,"Alice, Ben",$250.00 + GST,4H 3.5 hours\n'
    "5/3/2024,Bond clean - CANCELLED,Alice,300,2H\n"
    "6/3/2024,Touch up bathroom,Ben,100,1H\n"
    '10/3/24,Office fit-out,"Uppal/Dhruv, Alice",100,4 (A) 4.5 (B)\n'
    "TBC,Window wash,Alice,80,2H\n"
    '11/3/2024,Carpet steam,"Jasmine, Mitchell",200,\n'
)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("BOOKING_METRICS_SOURCE", raising=False)
    monkeypatch.delenv("BOOKING_METRICS_CONFIG", raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_export_text() -> str:
    return SAMPLE_EXPORT


@pytest.fixture()
def write_export(temp_workdir: Path, sample_export_text: str) -> Path:
    f = temp_workdir / "data" / "refined_jobs.csv"
    f.write_text(sample_export_text, encoding="utf-8")
    return f


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source: ./data/refined_jobs.csv
timezone: Australia/Melbourne
payouts:
  subcontractor: Uppal/Dhruv
  fixed_rate_employees: [Jasmine, Mitchell, Priya]
non_hourly_employees: [Uppal/Dhruv, Jasmine, Mitchell, Priya]
money:
  thousands_separators: false
thresholds:
  min_jobs: 5
  top_n: 10
fetch:
  timeout_seconds: 5
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "dashboard.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def rules() -> PayoutRules:
    return PayoutRules(
        subcontractor="Uppal/Dhruv",
        fixed_rate_employees=frozenset({"Jasmine", "Mitchell", "Priya"}),
    )


@pytest.fixture()
def make_job(rules: PayoutRules):
    """Factory for ProcessedJob with payouts allocated by the default roster."""
    def _make(
        d: date,
        employees: list[str],
        value: float = 100.0,
        paid_hours: float | None = None,
        *,
        billable: bool | None = None,
        cancelled: bool = False,
    ) -> ProcessedJob:
        names = tuple(employees)
        is_billable = billable if billable is not None else (value > 0 and not cancelled)
        return ProcessedJob(
            date=d,
            date_key=date_key(d),
            booking_name="Cancelled job" if cancelled else "Job",
            employees=names,
            value=value,
            paid_hours=paid_hours,
            is_cancelled=cancelled,
            is_touch_up=False,
            has_gst=False,
            is_billable=is_billable,
            employee_payouts=allocate_payouts(names, value, rules),
        )
    return _make


@pytest.fixture()
def in_dir():
    """Run a callable with the working directory temporarily switched."""
    def _run(path: Path, fn, *args, **kwargs):
        before = os.getcwd()
        try:
            os.chdir(path)
            return fn(*args, **kwargs)
        finally:
            os.chdir(before)
    return _run
