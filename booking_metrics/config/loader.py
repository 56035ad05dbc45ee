from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_FIXED_RATE_EMPLOYEES,
    DEFAULT_SUBCONTRACTOR,
    DashboardConfig,
    PayoutRules,
    Thresholds,
)

"""Config loader.

Responsibilities:
- Load the YAML dashboard config (default ``config/dashboard.yml``)
- Validate it against the bundled JSON schema
- Apply defaults (timezone=UTC, built-in payout roster, thresholds 5/10)
- Let ``BOOKING_METRICS_SOURCE`` override the configured source
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SOURCE_ENV_VAR",
    "load_config",
]

SCHEMA_PATH = Path(__file__).parent / "schema.json"
DEFAULT_CONFIG_PATH = Path("config/dashboard.yml")
SOURCE_ENV_VAR = "BOOKING_METRICS_SOURCE"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            data fails validation (missing keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _check_timezone(tz: str) -> str:
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {tz}") from e
    return tz


def _build_payout_rules(data: dict[str, Any]) -> PayoutRules:
    payouts = data.get("payouts", {})
    fixed = payouts.get("fixed_rate_employees")
    non_hourly = data.get("non_hourly_employees")
    return PayoutRules(
        subcontractor=payouts.get("subcontractor", DEFAULT_SUBCONTRACTOR),
        fixed_rate_employees=(
            frozenset(fixed) if fixed is not None else DEFAULT_FIXED_RATE_EMPLOYEES
        ),
        non_hourly_employees=frozenset(non_hourly) if non_hourly is not None else None,
    )


def load_config(path: Path) -> DashboardConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    thresholds_raw = data.get("thresholds", {})
    return DashboardConfig(
        source=os.getenv(SOURCE_ENV_VAR) or data["source"],
        timezone=_check_timezone(data.get("timezone", "UTC")),
        payouts=_build_payout_rules(data),
        thresholds=Thresholds(
            min_jobs=thresholds_raw.get("min_jobs", 5),
            top_n=thresholds_raw.get("top_n", 10),
        ),
        thousands_separators=data.get("money", {}).get("thousands_separators", False),
        fetch_timeout_seconds=float(data.get("fetch", {}).get("timeout_seconds", 30)),
    )
