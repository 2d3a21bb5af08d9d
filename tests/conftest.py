"""Shared fixtures: a small, valid signal-set document."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest


SAMPLE_DOCUMENT: dict[str, Any] = {
    "commands": [
        {
            "hdr": "7E0",
            "rax": "7E8",
            "cmd": {"22": "1234"},
            "freq": 0.5,
            "signals": [
                {
                    "id": "TEST_SPEED",
                    "path": "Movement",
                    "name": "Vehicle speed",
                    "fmt": {"len": 16, "div": 100, "max": 655.35, "unit": "kilometersPerHour"},
                },
                {
                    "id": "TEST_GEAR",
                    "path": "Transmission",
                    "name": "Gear",
                    "fmt": {
                        "bix": 16,
                        "len": 8,
                        "map": {
                            "0": {"description": "Park", "value": "P"},
                            "1": {"description": "Drive", "value": "D"},
                        },
                    },
                },
            ],
        },
        {
            "hdr": "7E0",
            "cmd": {"22": "5678"},
            "freq": 5,
            "dbgfilter": {"from": 2019, "to": 2021},
            "signals": [
                {
                    "id": "TEST_COOLANT",
                    "path": "Engine",
                    "name": "Coolant temperature",
                    "fmt": {"len": 8, "add": -40, "min": -40, "max": 215, "unit": "celsius"},
                },
            ],
        },
        {
            "hdr": "7E4",
            "rax": "7EC",
            "cmd": {"22": "0101"},
            "freq": 10,
            "signals": [
                {
                    "id": "TEST_HVBAT_CURRENT",
                    "path": "Battery",
                    "name": "HV battery current",
                    "fmt": {"len": 16, "sign": True, "div": 10, "unit": "amps"},
                    "din": "1a",
                    "dout": "2b",
                },
            ],
        },
    ]
}


@pytest.fixture
def document() -> dict[str, Any]:
    """A fresh copy of the sample document, safe to mutate."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def document_path(tmp_path: Path, document: dict[str, Any]) -> Path:
    """The sample document written to a file."""
    path = tmp_path / "default.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path
