"""Response decoding and encoding."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Sequence, Union

from signalset.config import DecoderConfig
from signalset.core.bitfield import extract_bits, insert_bits
from signalset.errors import DecodeError, OutOfRangeError, SignalSetError, UnmappedEnumError
from signalset.scaling.engine import DecodedValue, EnumValue, decode_value, encode_value
from signalset.schema.command import Command, Signal, SignalSet


logger = logging.getLogger(__name__)


Quality = Literal["OK", "OUT_OF_RANGE", "UNMAPPED_ENUM"]


@dataclass(frozen=True)
class DecodedSignal:
    """The outcome of decoding one signal from a response.

    ``value`` is None when decoding failed; ``quality`` says why.
    """

    signal_id: str
    name: str
    raw_value: Optional[int]
    value: Optional[DecodedValue]
    quality: Quality = "OK"
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.quality == "OK"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signal_id": self.signal_id,
            "name": self.name,
            "raw_value": self.raw_value,
            "value": self.value.to_dict() if self.value is not None else None,
            "quality": self.quality,
            "error": self.error,
        }

    def __repr__(self) -> str:
        if self.value is None:
            return f"{self.signal_id}=<{self.quality}>"
        return f"{self.signal_id}={self.value}"


@dataclass(frozen=True)
class DecodedResponse:
    """Every signal decoded from one response buffer, in command order."""

    header: str
    request: str
    signals: Dict[str, DecodedSignal] = field(default_factory=dict)
    raw_data: bytes = b""

    def get(self, signal_id: str) -> Optional[DecodedSignal]:
        return self.signals.get(signal_id)

    @property
    def ok(self) -> bool:
        return all(s.ok for s in self.signals.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hdr": self.header,
            "cmd": self.request,
            "data_hex": self.raw_data.hex().upper(),
            "signals": [s.to_dict() for s in self.signals.values()],
        }

    def __repr__(self) -> str:
        sig_str = ", ".join(repr(s) for s in self.signals.values())
        return f"{self.header} {self.request}: {sig_str}"


class ResponseDecoder:
    """Decodes response buffers using a loaded signal set.

    The decoder holds no mutable state: the signal set is read-only and each
    call works on its own buffer, so one decoder can serve many threads.
    A failure in one signal never stops its siblings from being decoded.
    """

    def __init__(self, signalset: SignalSet, config: Optional[DecoderConfig] = None) -> None:
        self._signalset = signalset
        self._config = config or DecoderConfig()

    @property
    def signalset(self) -> SignalSet:
        return self._signalset

    def decode_signal(self, signal: Signal, buffer: bytes) -> DecodedSignal:
        """Decode one signal; errors become the result's quality."""
        fmt = signal.format
        try:
            raw = extract_bits(buffer, fmt.bit_offset, fmt.bit_length, fmt.signed)
        except OutOfRangeError as e:
            logger.debug("%s: %s", signal.id, e)
            return DecodedSignal(
                signal_id=signal.id,
                name=signal.name,
                raw_value=None,
                value=None,
                quality="OUT_OF_RANGE",
                error=str(e),
            )

        try:
            value: Optional[DecodedValue] = decode_value(raw, fmt)
        except UnmappedEnumError as e:
            logger.debug("%s: %s", signal.id, e)
            value = None
            if self._config.substitute_unknown_enum:
                value = EnumValue(
                    label=self._config.unknown_label,
                    symbol=self._config.unknown_symbol,
                )
            return DecodedSignal(
                signal_id=signal.id,
                name=signal.name,
                raw_value=raw,
                value=value,
                quality="UNMAPPED_ENUM",
                error=str(e),
            )

        return DecodedSignal(signal_id=signal.id, name=signal.name, raw_value=raw, value=value)

    def decode_command(self, command: Command, buffer: bytes) -> DecodedResponse:
        """Decode every signal of a command against the same buffer."""
        return self._decode_commands([command], buffer)

    def decode(
        self,
        header: str,
        request: str,
        buffer: bytes,
        model_year: Optional[int] = None,
    ) -> Optional[DecodedResponse]:
        """Decode a response for a header and wire request such as "221234".

        Returns None if no command in the signal set matches.
        """
        commands = self._signalset.find(header, request, model_year)
        if not commands:
            logger.debug("No command for %s %s (model year %s)", header, request, model_year)
            return None
        return self._decode_commands(commands, buffer)

    def _decode_commands(self, commands: Sequence[Command], buffer: bytes) -> DecodedResponse:
        header, request = commands[0].key
        signals: Dict[str, DecodedSignal] = {}
        for command in commands:
            for signal in command.signals:
                signals[signal.id] = self.decode_signal(signal, buffer)

        return DecodedResponse(header=header, request=request, signals=signals, raw_data=bytes(buffer))

    def encode_command(
        self,
        command: Command,
        values: Mapping[str, Union[int, float, str]],
    ) -> bytes:
        """Build a response buffer for a command from physical values.

        Signals without a value are left as zero bits.

        Raises:
            SignalSetError: If a value names a signal the command does not carry.
            DecodeError: If a value cannot be encoded.
        """
        return self._encode_commands([command], values)

    def encode(
        self,
        header: str,
        request: str,
        values: Mapping[str, Union[int, float, str]],
        model_year: Optional[int] = None,
    ) -> bytes:
        """Build a response buffer for a header and wire request."""
        commands = self._signalset.find(header, request, model_year)
        if not commands:
            raise SignalSetError(f"No command for {header} {request}")
        return self._encode_commands(commands, values)

    def _encode_commands(
        self,
        commands: Sequence[Command],
        values: Mapping[str, Union[int, float, str]],
    ) -> bytes:
        by_id = {s.id: s for c in commands for s in c.signals}
        buffer = bytes(max(c.response_length for c in commands))

        for signal_id, value in values.items():
            signal = by_id.get(signal_id)
            if signal is None:
                raise SignalSetError(f"Signal {signal_id} is not carried by this command")

            fmt = signal.format
            raw = encode_value(value, fmt)
            try:
                buffer = insert_bits(buffer, fmt.bit_offset, fmt.bit_length, raw, fmt.signed)
            except ValueError as e:
                raise DecodeError(f"{signal_id}: {e}") from e

        return buffer
