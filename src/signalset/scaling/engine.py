"""Linear scaling between raw integers and physical values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from signalset.core.bitfield import raw_domain
from signalset.errors import DecodeError, UnmappedEnumError
from signalset.schema.enums import Unit
from signalset.schema.format import Number, SignalFormat, is_number


@dataclass(frozen=True)
class Measurement:
    """A scaled physical value with its unit."""

    value: float
    unit: Optional[Unit] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "unit": self.unit.value if self.unit else None}

    def __str__(self) -> str:
        unit = self.unit.symbol if self.unit else ""
        return f"{self.value:g}{unit}"


@dataclass(frozen=True)
class EnumValue:
    """A raw value resolved through a signal's enum map."""

    label: str
    symbol: str

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "symbol": self.symbol}

    def __str__(self) -> str:
        return f"{self.label} ({self.symbol})"


DecodedValue = Union[Measurement, EnumValue]


def apply_formula(raw: int, fmt: SignalFormat) -> float:
    """Evaluate ``raw * multiplier / divisor + offset`` without clamping.

    The product is formed before the division so integer coefficients stay
    exact until the single rounding step of the divide.
    """
    if fmt.divisor == 0:
        raise ZeroDivisionError("Signal format divisor is zero")
    return raw * fmt.multiplier / fmt.divisor + fmt.offset


def clamp(value: float, low: Optional[Number] = None, high: Optional[Number] = None) -> float:
    """Pull value into [low, high]; missing bounds are open."""
    if low is not None and value < low:
        value = low
    if high is not None and value > high:
        value = high
    return value


def achievable_range(fmt: SignalFormat) -> tuple[float, float]:
    """Image of the raw domain under the scaling formula, as (low, high).

    The formula is linear in the raw value, so the image is the interval
    between the two transformed domain endpoints.
    """
    low, high = raw_domain(fmt.bit_length, fmt.signed)
    a = apply_formula(low, fmt)
    b = apply_formula(high, fmt)
    return (a, b) if a <= b else (b, a)


def decode_value(raw: int, fmt: SignalFormat) -> DecodedValue:
    """Convert a raw integer into a measurement or an enum value.

    Raises:
        UnmappedEnumError: If the format is enumerated and raw has no entry.
    """
    if fmt.enum_map is not None:
        entry = fmt.enum_map.get(raw)
        if entry is None:
            raise UnmappedEnumError(raw)
        return EnumValue(label=entry.label, symbol=entry.symbol)

    value = clamp(apply_formula(raw, fmt), fmt.min_clamp, fmt.max_clamp)
    return Measurement(value=value, unit=fmt.unit)


def encode_value(value: Union[Number, str], fmt: SignalFormat) -> int:
    """Convert a physical value (or enum symbol/label) back into a raw integer.

    Numeric values are clamped to the format's bounds, inverted through the
    formula, rounded to the nearest integer and saturated to the raw domain.

    Raises:
        UnmappedEnumError: If an enum format has no entry for value.
        DecodeError: If the formula cannot be inverted.
    """
    if fmt.enum_map is not None:
        for raw, entry in fmt.enum_map.items():
            if value == entry.symbol or value == entry.label:
                return raw
        if isinstance(value, int) and not isinstance(value, bool) and value in fmt.enum_map:
            return value
        raise UnmappedEnumError(value)

    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            raise DecodeError(f"Expected a number, got {value!r}") from None
    if not is_number(value):
        raise DecodeError(f"Expected a finite number, got {value!r}")

    if fmt.multiplier == 0:
        raise DecodeError("Cannot invert a format with a zero multiplier")
    if fmt.divisor == 0:
        raise DecodeError("Cannot invert a format with a zero divisor")

    value = clamp(value, fmt.min_clamp, fmt.max_clamp)
    raw = round((value - fmt.offset) * fmt.divisor / fmt.multiplier)

    low, high = raw_domain(fmt.bit_length, fmt.signed)
    return int(clamp(raw, low, high))
