from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from cellmap.config.loader import DEFAULT_CELL_MAPPINGS, SCHEMA_PATH

"""Config schema contract test (cellmap/config/config_schema.json)."""


@pytest.fixture(scope="module")
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_config_schema_valid_example(schema):
    config = {
        "source_directory": "./data",
        "sheet": None,
        "cell_mappings": {
            "strike.Ударні": "B4:D15",
            "recon.Розвідка": "B18:C20+E18:F20",
            "summary.totalFlights": "B23",
        },
        "icons": {"Ударні": "rocket"},
    }
    jsonschema.validate(config, schema)


def test_defaults_satisfy_schema(schema):
    jsonschema.validate({"source_directory": "./data", "cell_mappings": DEFAULT_CELL_MAPPINGS}, schema)


def test_example_config_file_satisfies_schema(schema):
    example = SCHEMA_PATH.parents[2] / "config" / "cellmap.example.yml"
    jsonschema.validate(yaml.safe_load(example.read_text(encoding="utf-8")), schema)


@pytest.mark.parametrize(
    "config",
    [
        {},
        {"source_directory": ""},
        {"source_directory": "./data", "extra": True},
        {"source_directory": "./data", "cell_mappings": {"strike": "B4:D15"}},
        {"source_directory": "./data", "cell_mappings": {"totals.flights": "B23"}},
        {"source_directory": "./data", "cell_mappings": {"strike.x": ["B4:D15"]}},
        {"source_directory": "./data", "icons": {"x": 1}},
        {"source_directory": "./data", "sheet": 3},
    ],
)
def test_config_schema_rejects(schema, config):
    with pytest.raises(ValidationError):
        jsonschema.validate(config, schema)
