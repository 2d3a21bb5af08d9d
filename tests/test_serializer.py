"""Tests for canonical JSON output."""

from __future__ import annotations

import json
from typing import Any

from signalset.loader.loader import load_signalset
from signalset.loader.serializer import dumps, to_document


class TestCanonicalForm:
    """Tests for to_document and dumps."""

    def test_defaults_omitted(self, document: dict[str, Any]) -> None:
        document["commands"][0]["signals"][0]["fmt"] = {
            "bix": 0,
            "len": 16,
            "sign": False,
            "mul": 1,
            "div": 100,
            "add": 0,
        }

        out = to_document(load_signalset(document).signalset)

        assert out["commands"][0]["signals"][0]["fmt"] == {"len": 16, "div": 100}

    def test_key_order(self, document: dict[str, Any]) -> None:
        out = to_document(load_signalset(document).signalset)

        command = out["commands"][0]
        assert list(command) == ["hdr", "rax", "cmd", "freq", "signals"]
        assert list(command["signals"][0]) == ["id", "path", "name", "fmt"]
        assert list(command["signals"][0]["fmt"]) == ["len", "div", "max", "unit"]

    def test_commands_sorted(self, document: dict[str, Any]) -> None:
        document["commands"].reverse()

        out = to_document(load_signalset(document).signalset)

        assert [c["hdr"] for c in out["commands"]] == ["7E0", "7E0", "7E4"]
        assert [c["cmd"] for c in out["commands"]] == [
            {"22": "1234"},
            {"22": "5678"},
            {"22": "0101"},
        ]

    def test_signal_order_kept(self, document: dict[str, Any]) -> None:
        document["commands"][0]["signals"].reverse()

        out = to_document(load_signalset(document).signalset)

        assert [s["id"] for s in out["commands"][0]["signals"]] == ["TEST_GEAR", "TEST_SPEED"]

    def test_values_normalized(self, document: dict[str, Any]) -> None:
        document["commands"][1]["freq"] = 5.0
        document["commands"][0]["hdr"] = "7e0"

        out = to_document(load_signalset(document).signalset)

        assert out["commands"][0]["hdr"] == "7E0"
        assert out["commands"][1]["freq"] == 5
        assert isinstance(out["commands"][1]["freq"], int)
        assert out["commands"][2]["signals"][0]["din"] == "1A"

    def test_enum_map(self, document: dict[str, Any]) -> None:
        out = to_document(load_signalset(document).signalset)

        assert out["commands"][0]["signals"][1]["fmt"]["map"] == {
            "0": {"description": "Park", "value": "P"},
            "1": {"description": "Drive", "value": "D"},
        }

    def test_idempotent(self, document: dict[str, Any]) -> None:
        document["commands"].reverse()
        first = dumps(load_signalset(document).signalset)

        second = dumps(load_signalset(json.loads(first)).signalset)

        assert first == second
        assert first.endswith("}\n")
