from __future__ import annotations

import importlib.util
from pathlib import Path

from booking_metrics.cli import main as cli_main
from booking_metrics.models.config_models import DashboardConfig
from booking_metrics.services.pipeline import run_pipeline

"""Exports whose rows do not all match the header width."""

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _load_generator():
    spec = importlib.util.spec_from_file_location(
        "gen_sample_export", PROJECT_ROOT / "scripts" / "gen_sample_export.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_ragged_export_recovers_and_warns(write_config, temp_workdir: Path, capsys):
    (temp_workdir / "data" / "refined_jobs.csv").write_text(
        "Date,Booking Name,Employees,Cost,Hours Paid Out,Notes\n"
        "4/3/2024,Kitchen clean,Alice,100,2H\n"
        "5/3/2024,Bond clean,Ben,200,3H,call ahead\n"
        "6/3/2024,Window wash,Alice,50,1H\n",
        encoding="utf-8",
    )
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "WARN 2 rows had a field-count mismatch; rebuilt 3 rows using dominant row length 5" in out
    assert "SUMMARY rows=3 jobs=3 billable=3 dropped=0 revenue=350.00 paid_hours=6.0" in out


def test_generated_export_runs_through_pipeline(tmp_path: Path):
    gen = _load_generator()
    export = tmp_path / "generated.csv"
    gen.write_export(export, gen.generate_rows(300, seed=7), delimiter="\t")

    result = run_pipeline(export.read_text(encoding="utf-8"), DashboardConfig(source=str(export)))
    diag = result.diagnostics
    assert diag.delimiter == "\t"
    assert diag.row_count == 300
    assert len(result.jobs) + result.dropped_rows == 300
    assert diag.recovered is True
    assert "Notes" not in diag.columns
    assert result.metrics.summary.total_jobs == len(result.jobs)
    assert result.metrics.weekly_revenue
