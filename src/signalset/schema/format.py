"""Signal format definitions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from signalset.schema.enums import Unit


Number = Union[int, float]


def is_number(value: Any) -> bool:
    """True for finite ints and floats; bools, NaN and infinities are rejected."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _number(d: Dict[str, Any], key: str, default: Optional[Number] = None) -> Optional[Number]:
    value = d.get(key, default)
    if value is None:
        return None
    if not is_number(value):
        raise TypeError(f"fmt.{key} must be a finite number, got {value!r}")
    return value


def _integer(d: Dict[str, Any], key: str, default: Optional[int] = None) -> int:
    value = d.get(key, default)
    if value is None:
        raise KeyError(f"fmt.{key} is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"fmt.{key} must be an integer, got {value!r}")
    return value


def compact_number(value: Number) -> Number:
    """Write integral floats as ints (100.0 -> 100)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class EnumEntry:
    """One entry of an enumerated signal: a display label and a symbol."""

    label: str
    symbol: str

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.label, "value": self.symbol}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "EnumEntry":
        if not isinstance(d, dict):
            raise TypeError(f"Enum entry must be an object, got {d!r}")
        return EnumEntry(label=str(d["description"]), symbol=str(d["value"]))


@dataclass(frozen=True)
class SignalFormat:
    """How to decode one value from a response buffer.

    The physical value is ``raw * multiplier / divisor + offset``, clamped to
    ``[min_clamp, max_clamp]`` when those are set. When ``enum_map`` is set the
    scaling fields are ignored and the raw integer is looked up instead.

    Formats are plain records: they are checked by
    :func:`signalset.validation.format_checks.check_format`, not on
    construction, so that a document with many problems can report all of them.
    """

    bit_length: int
    bit_offset: int = 0
    signed: bool = False
    multiplier: Number = 1
    divisor: Number = 1
    offset: Number = 0
    min_clamp: Optional[Number] = None
    max_clamp: Optional[Number] = None
    unit: Optional[Unit] = None
    enum_map: Optional[Dict[int, EnumEntry]] = None

    @property
    def is_enum(self) -> bool:
        return self.enum_map is not None

    @property
    def end_bit(self) -> int:
        """First bit after the field."""
        return self.bit_offset + self.bit_length

    def to_dict(self) -> Dict[str, Any]:
        # Canonical form: defaults omitted, integral numbers written as ints
        d: Dict[str, Any] = {}
        if self.bit_offset:
            d["bix"] = self.bit_offset
        d["len"] = self.bit_length
        if self.signed:
            d["sign"] = True
        if self.multiplier != 1:
            d["mul"] = compact_number(self.multiplier)
        if self.divisor != 1:
            d["div"] = compact_number(self.divisor)
        if self.offset != 0:
            d["add"] = compact_number(self.offset)
        if self.min_clamp is not None:
            d["min"] = compact_number(self.min_clamp)
        if self.max_clamp is not None:
            d["max"] = compact_number(self.max_clamp)
        if self.unit is not None:
            d["unit"] = self.unit.value
        if self.enum_map is not None:
            d["map"] = {
                str(raw): entry.to_dict() for raw, entry in sorted(self.enum_map.items())
            }
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "SignalFormat":
        # Inverse of to_dict(). Raises KeyError/TypeError/ValueError on malformed input.
        if not isinstance(d, dict):
            raise TypeError(f"fmt must be an object, got {d!r}")

        sign = d.get("sign", False)
        if not isinstance(sign, bool):
            raise TypeError(f"fmt.sign must be a boolean, got {sign!r}")

        unit = Unit(d["unit"]) if d.get("unit") is not None else None

        enum_map: Optional[Dict[int, EnumEntry]] = None
        raw_map = d.get("map")
        if raw_map is not None:
            if not isinstance(raw_map, dict):
                raise TypeError(f"fmt.map must be an object, got {raw_map!r}")
            enum_map = {int(k): EnumEntry.from_dict(v) for k, v in raw_map.items()}

        return SignalFormat(
            bit_length=_integer(d, "len"),
            bit_offset=_integer(d, "bix", 0),
            signed=sign,
            multiplier=_number(d, "mul", 1),
            divisor=_number(d, "div", 1),
            offset=_number(d, "add", 0),
            min_clamp=_number(d, "min"),
            max_clamp=_number(d, "max"),
            unit=unit,
            enum_map=enum_map,
        )
