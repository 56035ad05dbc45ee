from __future__ import annotations

from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from booking_metrics.ingest.fetch import FetchError, read_source
from booking_metrics.ingest.reader import EmptyExportError
from booking_metrics.models.config_models import DashboardConfig
from booking_metrics.models.metrics import PeriodRevenue
from booking_metrics.services.pipeline import load_and_run, run_pipeline


def test_run_pipeline_on_sample(sample_export_text: str):
    result = run_pipeline(sample_export_text, DashboardConfig(source="unused.csv"))
    assert len(result.jobs) == 5
    assert result.dropped_rows == 1
    assert result.last_updated == date(2024, 3, 11)
    assert result.diagnostics.row_count == 6
    assert result.metrics.weekly_revenue == (
        PeriodRevenue("2024-03-04", 350.0),
        PeriodRevenue("2024-03-11", 200.0),
    )
    payouts = {e.employee: e.earnings for e in result.metrics.top_employees}
    assert payouts == {
        "Alice": 350.0,
        "Ben": 250.0,
        "Jasmine": 50.0,
        "Mitchell": 50.0,
        "Uppal/Dhruv": 50.0,
    }


def test_run_pipeline_ticks_progress_once_per_row(sample_export_text: str):
    with patch("booking_metrics.services.pipeline.RowProgress") as mock_progress:
        bar = mock_progress.return_value.__enter__.return_value
        run_pipeline(sample_export_text, DashboardConfig(source="unused.csv"))
    mock_progress.assert_called_once_with(6)
    assert bar.tick.call_count == 6
    bar.set_postfix.assert_called_once_with(jobs=5, dropped=1)


def test_run_pipeline_empty_export_raises():
    with pytest.raises(EmptyExportError):
        run_pipeline("Date,Cost\n", DashboardConfig(source="unused.csv"))


def test_load_and_run_reads_configured_source(write_export: Path):
    cfg = DashboardConfig(source=str(write_export), fetch_timeout_seconds=3.0)
    with patch("booking_metrics.services.pipeline.read_source", wraps=read_source) as mock_read:
        result = load_and_run(cfg)
    mock_read.assert_called_once_with(str(write_export), timeout=3.0)
    assert result.metrics.summary.billable_jobs == 3


def test_load_and_run_propagates_fetch_error(temp_workdir: Path):
    with pytest.raises(FetchError):
        load_and_run(DashboardConfig(source=str(temp_workdir / "missing.csv")))
