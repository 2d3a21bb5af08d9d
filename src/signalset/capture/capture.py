from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional
import json

from signalset.decoder.decoder import DecodedResponse, ResponseDecoder


def parse_hex(hex_str: str) -> bytes:
    """Parse "480D", "48 0D" or "0x480d" into bytes."""
    # Allow optional "0x" prefix and whitespace between bytes
    s = "".join(hex_str.split()).lower()
    if s.startswith("0x"):
        s = s[2:]
    if len(s) % 2 != 0:
        raise ValueError(f"Hex string must have even length, got {len(s)}")
    return bytes.fromhex(s)


@dataclass(frozen=True)
class CapturedResponse:

    # One response buffer as captured from the bus, keyed by the request
    # that produced it.

    header: str
    request: str
    data: bytes
    timestamp_ns: int = 0

    def __post_init__(self) -> None:
        if self.timestamp_ns < 0:
            raise ValueError("timestamp_ns must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        # JSONL-friendly serialization (bytes -> hex)
        return {
            "timestamp_ns": self.timestamp_ns,
            "hdr": self.header,
            "cmd": self.request,
            "data_hex": self.data.hex().upper(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CapturedResponse":
        # Inverse of to_dict().
        return CapturedResponse(
            header=str(d["hdr"]).upper(),
            request=str(d["cmd"]).upper(),
            data=parse_hex(str(d["data_hex"])),
            timestamp_ns=int(d.get("timestamp_ns", 0)),
        )


@dataclass
class ResponseReplayer:
    # Decodes previously captured responses from a JSONL file, in file order.
    # Responses with no matching command are counted and skipped.

    path: Path
    model_year: Optional[int] = None

    def _iter_responses(self) -> Iterator[CapturedResponse]:
        with self.path.open("r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    captured = CapturedResponse.from_dict(json.loads(line))
                except (KeyError, TypeError, ValueError) as e:
                    raise ValueError(f"{self.path}:{lineno}: {e!r}") from e
                yield captured

    def run(
        self,
        decoder: ResponseDecoder,
        publish: Callable[[CapturedResponse, DecodedResponse], None],
        limit: Optional[int] = None,
    ) -> tuple[int, int]:
        """Return (decoded, unmatched) counts."""
        decoded = 0
        unmatched = 0

        for captured in self._iter_responses():
            if limit is not None and decoded + unmatched >= limit:
                break

            response = decoder.decode(
                captured.header,
                captured.request,
                captured.data,
                model_year=self.model_year,
            )
            if response is None:
                unmatched += 1
                continue

            publish(captured, response)
            decoded += 1

        return decoded, unmatched
