from __future__ import annotations

from pathlib import Path

import pytest

from booking_metrics.config.loader import SOURCE_ENV_VAR, ConfigError, load_config
from booking_metrics.models.config_models import DEFAULT_FIXED_RATE_EMPLOYEES


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source == "./data/refined_jobs.csv"
    assert cfg.timezone == "Australia/Melbourne"
    assert cfg.payouts.subcontractor == "Uppal/Dhruv"
    assert cfg.payouts.fixed_rate_employees == frozenset({"Jasmine", "Mitchell", "Priya"})
    assert cfg.thresholds.min_jobs == 5
    assert cfg.thresholds.top_n == 10
    assert cfg.thousands_separators is False
    assert cfg.fetch_timeout_seconds == 5.0


def test_minimal_config_applies_defaults(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "dashboard.yml"
    cfg_path.write_text("source: https://example.com/export.csv\n", encoding="utf-8")
    cfg = load_config(cfg_path)
    assert cfg.timezone == "UTC"
    assert cfg.payouts.fixed_rate_employees == DEFAULT_FIXED_RATE_EMPLOYEES
    assert cfg.payouts.non_hourly_employees is None
    assert cfg.payouts.is_non_hourly("uppal/dhruv")
    assert cfg.fetch_timeout_seconds == 30.0


def test_env_var_overrides_source(write_config: Path, monkeypatch):
    monkeypatch.setenv(SOURCE_ENV_VAR, "https://example.com/live.csv")
    cfg = load_config(write_config)
    assert cfg.source == "https://example.com/live.csv"


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError) as e:
        load_config(temp_workdir / "config" / "nope.yml")
    assert "config file not found" in str(e.value)


def test_invalid_yaml(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "dashboard.yml"
    cfg_path.write_text("source: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(cfg_path)
    assert "invalid yaml" in str(e.value)


def test_top_level_must_be_mapping(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "dashboard.yml"
    cfg_path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(cfg_path)


@pytest.mark.parametrize(
    "body",
    [
        "timezone: UTC\n",  # source missing
        "source: ''\n",
        "source: x.csv\nunexpected: 1\n",
        "source: x.csv\nthresholds:\n  min_jobs: 0\n",
        "source: x.csv\nmoney:\n  thousands_separators: 'yes'\n",
        "source: x.csv\nfetch:\n  timeout_seconds: 0\n",
    ],
)
def test_schema_rejects_bad_config(temp_workdir: Path, body: str):
    cfg_path = temp_workdir / "config" / "dashboard.yml"
    cfg_path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(cfg_path)
    assert "config validation failed" in str(e.value)


def test_unknown_timezone(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "dashboard.yml"
    cfg_path.write_text("source: x.csv\ntimezone: Mars/Olympus\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(cfg_path)
    assert "unknown timezone" in str(e.value)


def test_explicit_non_hourly_list(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "dashboard.yml"
    cfg_path.write_text(
        "source: x.csv\nnon_hourly_employees: [Alice]\n", encoding="utf-8"
    )
    cfg = load_config(cfg_path)
    assert cfg.payouts.is_non_hourly(" ALICE ")
    assert not cfg.payouts.is_non_hourly("Jasmine")
