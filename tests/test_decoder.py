"""Tests for response decoding and encoding."""

from __future__ import annotations

from typing import Any

import pytest

from signalset.config import DecoderConfig
from signalset.decoder.decoder import ResponseDecoder
from signalset.errors import SignalSetError, UnmappedEnumError
from signalset.loader.loader import load_signalset
from signalset.scaling.engine import EnumValue, Measurement
from signalset.schema.enums import Unit


@pytest.fixture
def decoder(document: dict[str, Any]) -> ResponseDecoder:
    """A decoder for the sample document."""
    return ResponseDecoder(load_signalset(document).signalset)


class TestDecode:
    """Tests for ResponseDecoder.decode."""

    def test_multi_signal_response(self, decoder: ResponseDecoder) -> None:
        """Test decoding two signals from one buffer."""
        response = decoder.decode("7E0", "221234", bytes([0x48, 0x0D, 0x01]))

        assert response is not None
        assert response.ok
        assert list(response.signals) == ["TEST_SPEED", "TEST_GEAR"]

        speed = response.get("TEST_SPEED")
        assert speed is not None
        assert speed.raw_value == 18445
        assert isinstance(speed.value, Measurement)
        assert speed.value.value == pytest.approx(184.45)
        assert speed.value.unit == Unit.KILOMETERS_PER_HOUR

        gear = response.get("TEST_GEAR")
        assert gear is not None
        assert gear.value == EnumValue(label="Drive", symbol="D")

    def test_signed_signal(self, decoder: ResponseDecoder) -> None:
        response = decoder.decode("7E4", "220101", bytes([0xFF, 0x38]))

        assert response is not None
        current = response.get("TEST_HVBAT_CURRENT")
        assert current is not None
        assert current.raw_value == -200
        assert current.value.value == pytest.approx(-20.0)

    def test_clamped_value(self, decoder: ResponseDecoder) -> None:
        response = decoder.decode("7E0", "225678", bytes([0xFF]))

        assert response is not None
        assert response.get("TEST_COOLANT").value.value == 215

    def test_case_insensitive_lookup(self, decoder: ResponseDecoder) -> None:
        assert decoder.decode("7e0", "22abcd", b"") is None
        assert decoder.decode("7e0", "221234", bytes(3)) is not None

    def test_unknown_command(self, decoder: ResponseDecoder) -> None:
        assert decoder.decode("7DF", "010C", bytes(2)) is None

    def test_short_buffer_does_not_abort_siblings(self, decoder: ResponseDecoder) -> None:
        """Test that one out-of-range signal leaves the others decoded."""
        response = decoder.decode("7E0", "221234", bytes([0x48, 0x0D]))

        assert response is not None
        assert not response.ok
        assert response.get("TEST_SPEED").ok
        gear = response.get("TEST_GEAR")
        assert gear.quality == "OUT_OF_RANGE"
        assert gear.value is None
        assert gear.raw_value is None
        assert "exceeds" in gear.error

    def test_unmapped_enum(self, decoder: ResponseDecoder) -> None:
        response = decoder.decode("7E0", "221234", bytes([0x00, 0x00, 0x07]))

        gear = response.get("TEST_GEAR")
        assert gear.quality == "UNMAPPED_ENUM"
        assert gear.raw_value == 7
        assert gear.value is None
        assert response.get("TEST_SPEED").ok

    def test_unmapped_enum_sentinel(self, document: dict[str, Any]) -> None:
        decoder = ResponseDecoder(
            load_signalset(document).signalset,
            DecoderConfig(substitute_unknown_enum=True),
        )

        response = decoder.decode("7E0", "221234", bytes([0x00, 0x00, 0x07]))

        gear = response.get("TEST_GEAR")
        assert gear.quality == "UNMAPPED_ENUM"
        assert gear.value == EnumValue(label="Unknown", symbol="UNKNOWN")

    def test_overlapping_signals_independent(self, document: dict[str, Any]) -> None:
        document["commands"][0]["signals"].append(
            {"id": "TEST_SPEED_LOW", "path": "Movement", "fmt": {"bix": 8, "len": 8}}
        )
        decoder = ResponseDecoder(load_signalset(document).signalset)

        response = decoder.decode("7E0", "221234", bytes([0x48, 0x0D, 0x01]))

        assert response.get("TEST_SPEED").raw_value == 18445
        assert response.get("TEST_SPEED_LOW").raw_value == 0x0D

    def test_decode_command_ignores_year_filter(self, decoder: ResponseDecoder) -> None:
        command = decoder.signalset.commands[1]

        response = decoder.decode_command(command, bytes([0x82]))

        assert (response.header, response.request) == ("7E0", "225678")
        assert list(response.signals) == ["TEST_COOLANT"]
        assert response.get("TEST_COOLANT").value.value == 90

    def test_to_dict(self, decoder: ResponseDecoder) -> None:
        response = decoder.decode("7E0", "221234", bytes([0x48, 0x0D, 0x01]))

        d = response.to_dict()

        assert d["hdr"] == "7E0"
        assert d["cmd"] == "221234"
        assert d["data_hex"] == "480D01"
        assert d["signals"][0]["value"] == {"value": pytest.approx(184.45), "unit": "kilometersPerHour"}
        assert d["signals"][1]["value"] == {"label": "Drive", "symbol": "D"}


class TestModelYears:
    """Commands filtered by model year."""

    def test_year_inside_filter(self, decoder: ResponseDecoder) -> None:
        assert decoder.decode("7E0", "225678", bytes(1), model_year=2020) is not None

    def test_year_outside_filter(self, decoder: ResponseDecoder) -> None:
        assert decoder.decode("7E0", "225678", bytes(1), model_year=2022) is None

    def test_no_year_matches_all(self, decoder: ResponseDecoder) -> None:
        assert decoder.decode("7E0", "225678", bytes(1)) is not None

    def test_same_key_split_by_year(self, document: dict[str, Any]) -> None:
        document["commands"].append(
            {
                "hdr": "7E0",
                "cmd": {"22": "5678"},
                "dbgfilter": {"from": 2022},
                "signals": [
                    {"id": "TEST_COOLANT_V2", "path": "Engine", "fmt": {"len": 16, "div": 10, "add": -40}},
                ],
            }
        )
        decoder = ResponseDecoder(load_signalset(document).signalset)

        late = decoder.decode("7E0", "225678", bytes(2), model_year=2023)
        both = decoder.decode("7E0", "225678", bytes(2))

        assert list(late.signals) == ["TEST_COOLANT_V2"]
        assert list(both.signals) == ["TEST_COOLANT", "TEST_COOLANT_V2"]


class TestEncode:
    """Tests for building response buffers."""

    def test_encode_command(self, decoder: ResponseDecoder) -> None:
        buffer = decoder.encode("7E0", "221234", {"TEST_SPEED": 184.45, "TEST_GEAR": "D"})

        assert buffer == bytes([0x48, 0x0D, 0x01])

    def test_round_trip(self, decoder: ResponseDecoder) -> None:
        buffer = decoder.encode("7E4", "220101", {"TEST_HVBAT_CURRENT": -20})

        assert buffer == bytes([0xFF, 0x38])
        response = decoder.decode("7E4", "220101", buffer)
        assert response.get("TEST_HVBAT_CURRENT").value.value == pytest.approx(-20.0)

    def test_missing_values_are_zero(self, decoder: ResponseDecoder) -> None:
        assert decoder.encode("7E0", "221234", {"TEST_GEAR": "P"}) == bytes(3)

    def test_unknown_signal(self, decoder: ResponseDecoder) -> None:
        with pytest.raises(SignalSetError, match="not carried"):
            decoder.encode("7E0", "221234", {"TEST_COOLANT": 90})

    def test_unknown_command(self, decoder: ResponseDecoder) -> None:
        with pytest.raises(SignalSetError, match="No command"):
            decoder.encode("7DF", "010C", {})

    def test_unknown_enum_symbol(self, decoder: ResponseDecoder) -> None:
        with pytest.raises(UnmappedEnumError):
            decoder.encode("7E0", "221234", {"TEST_GEAR": "R"})

    def test_encode_command_directly(self, decoder: ResponseDecoder) -> None:
        command = decoder.signalset.commands[1]

        assert decoder.encode_command(command, {"TEST_COOLANT": 90}) == bytes([130])
