"""Tests for capture files: parsing, replay and JSONL output."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from signalset.capture.capture import CapturedResponse, ResponseReplayer, parse_hex
from signalset.capture.jsonl import JsonlWriter
from signalset.decoder.decoder import DecodedResponse, ResponseDecoder
from signalset.loader.loader import load_signalset


def _write_capture(path: Path, records: list[dict[str, Any]]) -> Path:
    lines = [json.dumps(r) for r in records]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def decoder(document: dict[str, Any]) -> ResponseDecoder:
    return ResponseDecoder(load_signalset(document).signalset)


@pytest.fixture
def capture_path(tmp_path: Path) -> Path:
    return _write_capture(
        tmp_path / "capture.jsonl",
        [
            {"timestamp_ns": 1000, "hdr": "7E0", "cmd": "221234", "data_hex": "480D01"},
            {"timestamp_ns": 2000, "hdr": "7DF", "cmd": "010C", "data_hex": "1AF8"},
            {"timestamp_ns": 3000, "hdr": "7E4", "cmd": "220101", "data_hex": "FF38"},
            {"timestamp_ns": 4000, "hdr": "7E0", "cmd": "225678", "data_hex": "82"},
        ],
    )


class TestParseHex:
    """Tests for parse_hex."""

    @pytest.mark.parametrize("text", ["480D01", "48 0D 01", "0x480d01", " 480d01\n"])
    def test_accepted_forms(self, text: str) -> None:
        assert parse_hex(text) == bytes([0x48, 0x0D, 0x01])

    def test_empty(self) -> None:
        assert parse_hex("") == b""

    def test_odd_length(self) -> None:
        with pytest.raises(ValueError, match="even length"):
            parse_hex("480")

    def test_not_hex(self) -> None:
        with pytest.raises(ValueError):
            parse_hex("ZZ")


class TestCapturedResponse:
    """Tests for CapturedResponse serialization."""

    def test_to_dict(self) -> None:
        captured = CapturedResponse(header="7E0", request="221234", data=b"\x48\x0d", timestamp_ns=5)

        assert captured.to_dict() == {
            "timestamp_ns": 5,
            "hdr": "7E0",
            "cmd": "221234",
            "data_hex": "480D",
        }

    def test_from_dict_normalizes(self) -> None:
        captured = CapturedResponse.from_dict({"hdr": "7e0", "cmd": "22abcd", "data_hex": "ff"})

        assert captured.header == "7E0"
        assert captured.request == "22ABCD"
        assert captured.data == b"\xff"
        assert captured.timestamp_ns == 0

    def test_negative_timestamp(self) -> None:
        with pytest.raises(ValueError):
            CapturedResponse(header="7E0", request="221234", data=b"", timestamp_ns=-1)


class TestResponseReplayer:
    """Tests for replaying capture files through a decoder."""

    def test_replays_in_file_order(self, decoder: ResponseDecoder, capture_path: Path) -> None:
        seen: list[tuple[int, DecodedResponse]] = []

        decoded, unmatched = ResponseReplayer(capture_path).run(
            decoder, lambda c, r: seen.append((c.timestamp_ns, r))
        )

        assert (decoded, unmatched) == (3, 1)
        assert [t for t, _ in seen] == [1000, 3000, 4000]
        assert seen[0][1].get("TEST_SPEED").value.value == pytest.approx(184.45)
        assert seen[1][1].get("TEST_HVBAT_CURRENT").value.value == pytest.approx(-20.0)
        assert seen[2][1].get("TEST_COOLANT").value.value == 90

    def test_limit_counts_unmatched(self, decoder: ResponseDecoder, capture_path: Path) -> None:
        seen: list[DecodedResponse] = []

        counts = ResponseReplayer(capture_path).run(decoder, lambda c, r: seen.append(r), limit=2)

        assert counts == (1, 1)
        assert len(seen) == 1

    def test_model_year_filters(self, decoder: ResponseDecoder, capture_path: Path) -> None:
        counts = ResponseReplayer(capture_path, model_year=2023).run(decoder, lambda c, r: None)

        assert counts == (2, 2)

    def test_blank_lines_skipped(self, decoder: ResponseDecoder, tmp_path: Path) -> None:
        path = tmp_path / "capture.jsonl"
        path.write_text(
            '\n{"hdr": "7E0", "cmd": "221234", "data_hex": "000000"}\n\n',
            encoding="utf-8",
        )

        assert ResponseReplayer(path).run(decoder, lambda c, r: None) == (1, 0)

    def test_malformed_line(self, decoder: ResponseDecoder, tmp_path: Path) -> None:
        path = _write_capture(
            tmp_path / "capture.jsonl",
            [
                {"hdr": "7E0", "cmd": "221234", "data_hex": "480D01"},
                {"hdr": "7E0", "cmd": "221234"},
            ],
        )

        with pytest.raises(ValueError, match=r"capture\.jsonl:2: KeyError"):
            ResponseReplayer(path).run(decoder, lambda c, r: None)

    @pytest.mark.parametrize("line", ["not json", "[1, 2]", '{"hdr": "7E0", "cmd": "22", "data_hex": "ABC"}'])
    def test_bad_lines_report_position(self, decoder: ResponseDecoder, tmp_path: Path, line: str) -> None:
        path = tmp_path / "capture.jsonl"
        path.write_text("\n" + line + "\n", encoding="utf-8")

        with pytest.raises(ValueError, match=r"capture\.jsonl:2:"):
            ResponseReplayer(path).run(decoder, lambda c, r: None)


class TestJsonlWriter:
    """Tests for the JSONL writer."""

    def test_append(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "decoded.jsonl"

        with JsonlWriter(path) as writer:
            writer.append({"hdr": "7E0", "n": 1})
            writer.append({"hdr": "7E4", "n": 2})

        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line) for line in lines] == [
            {"hdr": "7E0", "n": 1},
            {"hdr": "7E4", "n": 2},
        ]
        assert writer.count == 2

    def test_lines_visible_before_close(self, tmp_path: Path) -> None:
        path = tmp_path / "decoded.jsonl"
        writer = JsonlWriter(path)

        writer.append({"n": 1})

        assert path.read_text(encoding="utf-8") == '{"n":1}\n'
        writer.close()

    def test_truncates_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "decoded.jsonl"
        path.write_text("old\n", encoding="utf-8")

        JsonlWriter(path).close()

        assert path.read_text(encoding="utf-8") == ""

    def test_append_after_close(self, tmp_path: Path) -> None:
        writer = JsonlWriter(tmp_path / "decoded.jsonl")
        writer.close()
        writer.close()

        with pytest.raises(ValueError, match="closed"):
            writer.append({"n": 1})

    def test_decoded_response_round_trip(self, decoder: ResponseDecoder, tmp_path: Path) -> None:
        path = tmp_path / "decoded.jsonl"
        response = decoder.decode("7E0", "221234", bytes([0x48, 0x0D, 0x01]))

        with JsonlWriter(path) as writer:
            writer.append_response(response, timestamp_ns=42)

        record = json.loads(path.read_text(encoding="utf-8"))
        assert record["timestamp_ns"] == 42
        assert record["data_hex"] == "480D01"
        assert record["signals"][1]["value"] == {"label": "Drive", "symbol": "D"}
