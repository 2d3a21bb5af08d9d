"""Signal, command and signal-set records."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Sequence

from signalset.schema.enums import Category
from signalset.schema.format import SignalFormat, compact_number, is_number


HEADER_RE = re.compile(r"[0-9A-Fa-f]{3}")
DIAGNOSTIC_CODE_RE = re.compile(r"[0-9A-Fa-f]{2}")
SERVICE_RE = re.compile(r"[0-9A-Fa-f]{2}")
PID_RE = re.compile(r"(?:[0-9A-Fa-f]{2})+")


def _header(value: Any, key: str) -> str:
    if not isinstance(value, str) or not HEADER_RE.fullmatch(value):
        raise ValueError(f"{key} must be three hex digits, got {value!r}")
    return value.upper()


def _diagnostic_code(value: Any, key: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not DIAGNOSTIC_CODE_RE.fullmatch(value):
        raise ValueError(f"{key} must be two hex characters, got {value!r}")
    return value.upper()


@dataclass(frozen=True)
class ServiceRequest:
    """An OBD service code and PID, e.g. service 22 PID 1234."""

    service: str
    pid: str

    def __post_init__(self) -> None:
        if not SERVICE_RE.fullmatch(self.service):
            raise ValueError(f"Service must be two hex digits, got {self.service!r}")
        if not PID_RE.fullmatch(self.pid):
            raise ValueError(f"PID must be whole hex bytes, got {self.pid!r}")
        object.__setattr__(self, "service", self.service.upper())
        object.__setattr__(self, "pid", self.pid.upper())

    @property
    def wire(self) -> str:
        """Request string as sent on the wire, e.g. "221234"."""
        return self.service + self.pid

    def to_dict(self) -> Dict[str, str]:
        return {self.service: self.pid}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ServiceRequest":
        if not isinstance(d, dict) or len(d) != 1:
            raise ValueError(f"cmd must hold exactly one service/PID pair, got {d!r}")
        ((service, pid),) = d.items()
        if not isinstance(pid, str):
            raise TypeError(f"cmd PID must be a string, got {pid!r}")
        return ServiceRequest(service=service, pid=pid)

    @staticmethod
    def parse(wire: str) -> "ServiceRequest":
        """Parse a wire request string such as "221234" or "0105"."""
        wire = wire.strip().replace(" ", "")
        return ServiceRequest(service=wire[:2], pid=wire[2:])


@dataclass(frozen=True)
class ModelYearFilter:
    """Inclusive model-year range; a missing bound is unbounded."""

    year_from: Optional[int] = None
    year_to: Optional[int] = None

    def contains(self, year: int) -> bool:
        if self.year_from is not None and year < self.year_from:
            return False
        if self.year_to is not None and year > self.year_to:
            return False
        return True

    def to_dict(self) -> Dict[str, int]:
        d: Dict[str, int] = {}
        if self.year_from is not None:
            d["from"] = self.year_from
        if self.year_to is not None:
            d["to"] = self.year_to
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ModelYearFilter":
        if not isinstance(d, dict):
            raise TypeError(f"dbgfilter must be an object, got {d!r}")
        for key in ("from", "to"):
            value = d.get(key)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise TypeError(f"dbgfilter.{key} must be an integer, got {value!r}")
        return ModelYearFilter(year_from=d.get("from"), year_to=d.get("to"))


@dataclass(frozen=True)
class Signal:
    """One decoded quantity carried by a command's response."""

    id: str
    format: SignalFormat
    category: Category
    name: str = ""
    description: Optional[str] = None
    diagnostic_in: Optional[str] = None
    diagnostic_out: Optional[str] = None
    hidden: bool = False

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"id": self.id, "path": self.category.value}
        if self.name:
            d["name"] = self.name
        if self.description:
            d["description"] = self.description
        d["fmt"] = self.format.to_dict()
        if self.diagnostic_in is not None:
            d["din"] = self.diagnostic_in
        if self.diagnostic_out is not None:
            d["dout"] = self.diagnostic_out
        if self.hidden:
            d["hidden"] = True
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Signal":
        if not isinstance(d, dict):
            raise TypeError(f"Signal must be an object, got {d!r}")
        signal_id = d["id"]
        if not isinstance(signal_id, str) or not signal_id:
            raise ValueError(f"Signal id must be a non-empty string, got {signal_id!r}")
        hidden = d.get("hidden")
        if hidden is None:
            hidden = False
        elif not isinstance(hidden, bool):
            raise TypeError(f"hidden must be a boolean, got {hidden!r}")
        return Signal(
            id=signal_id,
            format=SignalFormat.from_dict(d["fmt"]),
            category=Category(d["path"]),
            name=str(d.get("name", "")),
            description=d.get("description"),
            diagnostic_in=_diagnostic_code(d.get("din"), "din"),
            diagnostic_out=_diagnostic_code(d.get("dout"), "dout"),
            hidden=hidden,
        )


@dataclass(frozen=True)
class Command:
    """A request and the ordered signals its response carries."""

    header: str
    request: ServiceRequest
    signals: tuple[Signal, ...] = ()
    response_address: Optional[str] = None
    poll_frequency: float = 1
    model_year_filter: Optional[ModelYearFilter] = None

    @property
    def key(self) -> tuple[str, str]:
        """(header, request) pair identifying the command on the wire."""
        return self.header, self.request.wire

    @property
    def response_length(self) -> int:
        """Smallest buffer length, in bytes, covering every signal."""
        end = max((s.format.end_bit for s in self.signals), default=0)
        return (end + 7) // 8

    def applies_to(self, model_year: Optional[int]) -> bool:
        if model_year is None or self.model_year_filter is None:
            return True
        return self.model_year_filter.contains(model_year)

    def get_signal(self, signal_id: str) -> Optional[Signal]:
        for signal in self.signals:
            if signal.id == signal_id:
                return signal
        return None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"hdr": self.header}
        if self.response_address is not None:
            d["rax"] = self.response_address
        d["cmd"] = self.request.to_dict()
        d["freq"] = compact_number(self.poll_frequency)
        if self.model_year_filter is not None:
            d["dbgfilter"] = self.model_year_filter.to_dict()
        d["signals"] = [s.to_dict() for s in self.signals]
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any], signals: Optional[Sequence[Signal]] = None) -> "Command":
        """Build a command; ``signals`` overrides parsing of d["signals"]."""
        if not isinstance(d, dict):
            raise TypeError(f"Command must be an object, got {d!r}")

        freq = d.get("freq", 1)
        if not is_number(freq) or freq <= 0:
            raise ValueError(f"freq must be a positive number, got {freq!r}")

        if signals is None:
            signals = [Signal.from_dict(s) for s in d.get("signals", [])]

        return Command(
            header=_header(d["hdr"], "hdr"),
            request=ServiceRequest.from_dict(d["cmd"]),
            signals=tuple(signals),
            response_address=_header(d["rax"], "rax") if d.get("rax") is not None else None,
            poll_frequency=freq,
            model_year_filter=(
                ModelYearFilter.from_dict(d["dbgfilter"]) if d.get("dbgfilter") is not None else None
            ),
        )


@dataclass(frozen=True)
class SignalSet:
    """A validated, read-only collection of commands.

    Attributes:
        commands: Commands in document order.
        meta: Top-level document keys other than "commands", kept verbatim.
    """

    commands: tuple[Command, ...] = ()
    meta: Dict[str, Any] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    @property
    def signals(self) -> list[Signal]:
        return [s for c in self.commands for s in c.signals]

    @property
    def signal_count(self) -> int:
        return sum(len(c.signals) for c in self.commands)

    def get_signal(self, signal_id: str) -> Optional[Signal]:
        for command in self.commands:
            signal = command.get_signal(signal_id)
            if signal is not None:
                return signal
        return None

    def commands_for_year(self, model_year: Optional[int]) -> list[Command]:
        return [c for c in self.commands if c.applies_to(model_year)]

    def find(
        self,
        header: str,
        request: str,
        model_year: Optional[int] = None,
    ) -> list[Command]:
        """Commands matching a header and wire request, optionally by model year.

        Several commands may share a key when they carry different
        model-year filters.
        """
        key = (header.upper(), request.upper())
        return [c for c in self.commands_for_year(model_year) if c.key == key]

    def to_dict(self) -> Dict[str, Any]:
        d = dict(self.meta)
        d["commands"] = [c.to_dict() for c in self.commands]
        return d
