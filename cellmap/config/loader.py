from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..excel.aggregate import split_spec
from ..excel.ranges import parse_range_string
from ..models.config_models import (
    RECON_VALUE_COLUMNS,
    STRIKE_VALUE_COLUMNS,
    AppConfig,
    DashboardConfig,
    SummaryCells,
)
from ..models.mapping import MappingConfiguration

"""Config loader and the flat dotted-key configuration surface.

Responsibilities:
- Load YAML config (default config/cellmap.yml)
- Validate it against config_schema.json
- Convert between flat mappings ("strike.<name>" -> "B4:D4") and DashboardConfig
- Apply the built-in defaults for keys the file does not set
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_CELL_MAPPINGS: dict[str, str] = {
    "strike.default": "B4:D15",
    "recon.default": "B18:C20",
    "summary.totalFlights": "B23",
    "summary.uniqueTargets": "B24",
    "summary.dateRangeStart": "B26",
    "summary.dateRangeEnd": "B27",
    "summary.monthlyStatsSheet": "Monthly",
    "summary.monthlyStatsRange": "A2:B13",
}

# flat key suffix -> SummaryCells field
SUMMARY_FIELDS: dict[str, str] = {
    "totalFlights": "total_flights",
    "uniqueTargets": "unique_targets",
    "dateRangeStart": "date_range_start",
    "dateRangeEnd": "date_range_end",
    "monthlyStatsSheet": "monthly_stats_sheet",
    "monthlyStatsRange": "monthly_stats_range",
}

_CATEGORY_VALUE_COLUMNS = {
    "strike": STRIKE_VALUE_COLUMNS,
    "recon": RECON_VALUE_COLUMNS,
}

# name of the shared per-category entry in DEFAULT_CELL_MAPPINGS
DEFAULT_ENTITY = "default"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the data
            fails validation (missing keys, wrong types, unknown keys).
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


def _drop_builtin_default(mapping: MappingConfiguration, category: str) -> MappingConfiguration:
    entry = mapping.find(DEFAULT_ENTITY)
    builtin = split_spec(DEFAULT_CELL_MAPPINGS[f"{category}.{DEFAULT_ENTITY}"])
    if entry is None or entry.range_strings() != builtin:
        return mapping
    return mapping.remove(DEFAULT_ENTITY)


def dashboard_from_flat(
    flat: Mapping[str, str],
    icons: Mapping[str, str] | None = None,
    base: DashboardConfig | None = None,
) -> DashboardConfig:
    """Apply a flat dotted-key mapping on top of ``base`` (empty config if None).

    Empty values leave the current setting untouched. Entity values may join
    several ranges with '+'; each becomes one range of the entry, in order.
    The first named strike.* (or recon.*) entity replaces that category's
    built-in "default" entry, unless the default was changed or is set in
    the same mapping.

    Raises:
        ConfigError: For keys outside strike./recon./summary., unknown
            summary fields, or non-string values.
    """
    cfg = base if base is not None else DashboardConfig()
    icons = icons or {}
    mappings = {"strike": cfg.strike, "recon": cfg.recon}
    summary = {attr: getattr(cfg.summary, attr) for attr in SUMMARY_FIELDS.values()}
    claimed: set[str] = set()

    for key, raw in flat.items():
        category, _, name = str(key).partition(".")
        if not name:
            raise ConfigError(f"invalid mapping key: {key!r}")
        if not isinstance(raw, str):
            raise ConfigError(f"mapping value for {key!r} must be a string, got {type(raw).__name__}")
        value = raw.strip()
        if not value:
            continue
        if category in mappings:
            try:
                mappings[category] = mappings[category].update(
                    name,
                    split_spec(value),
                    _CATEGORY_VALUE_COLUMNS[category],
                    icon=icons.get(name),
                )
                if name != DEFAULT_ENTITY:
                    claimed.add(category)
            except ValueError as e:
                raise ConfigError(f"invalid mapping {key!r}: {e}") from e
        elif category == "summary":
            attr = SUMMARY_FIELDS.get(name)
            if attr is None:
                raise ConfigError(f"unknown summary key: {key!r}")
            summary[attr] = value
        else:
            raise ConfigError(f"unknown mapping category: {key!r}")

    for category in claimed:
        if not str(flat.get(f"{category}.{DEFAULT_ENTITY}") or "").strip():
            mappings[category] = _drop_builtin_default(mappings[category], category)

    return DashboardConfig(
        strike=mappings["strike"],
        recon=mappings["recon"],
        summary=SummaryCells(**summary),
    )


def dashboard_to_flat(cfg: DashboardConfig) -> dict[str, str]:
    """Render a DashboardConfig as the flat dotted-key mapping."""
    flat: dict[str, str] = {}
    for entry in cfg.strike:
        flat[f"strike.{entry.name}"] = "+".join(entry.range_strings())
    for entry in cfg.recon:
        flat[f"recon.{entry.name}"] = "+".join(entry.range_strings())
    for suffix, attr in SUMMARY_FIELDS.items():
        flat[f"summary.{suffix}"] = getattr(cfg.summary, attr)
    return flat


def default_dashboard_config() -> DashboardConfig:
    return dashboard_from_flat(DEFAULT_CELL_MAPPINGS)


def validate_ranges(cfg: DashboardConfig) -> list[tuple[str, str]]:
    """List (flat key, spec) pairs whose range strings do not parse.

    monthlyStatsSheet is a sheet name, not a range, and is never reported.
    """
    problems: list[tuple[str, str]] = []
    for category, mapping in (("strike", cfg.strike), ("recon", cfg.recon)):
        for entry in mapping:
            if not all(r.is_valid() for r in entry.ranges):
                problems.append((f"{category}.{entry.name}", "+".join(entry.range_strings())))
    for suffix, attr in SUMMARY_FIELDS.items():
        if suffix == "monthlyStatsSheet":
            continue
        spec = getattr(cfg.summary, attr)
        if spec and not all(parse_range_string(part).is_valid() for part in split_spec(spec)):
            problems.append((f"summary.{suffix}", spec))
    return problems


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    icons = {str(k): v for k, v in (data.get("icons") or {}).items()}
    user_mappings = data.get("cell_mappings") or {}
    dashboard = dashboard_from_flat(DEFAULT_CELL_MAPPINGS, icons=icons)
    dashboard = dashboard_from_flat(user_mappings, icons=icons, base=dashboard)
    return AppConfig(
        source_directory=data["source_directory"],
        dashboard=dashboard,
        sheet=data.get("sheet"),
    )
