"""Raw <-> physical value scaling."""

from signalset.scaling.engine import (
    DecodedValue,
    EnumValue,
    Measurement,
    achievable_range,
    apply_formula,
    clamp,
    decode_value,
    encode_value,
)

__all__ = [
    "DecodedValue",
    "EnumValue",
    "Measurement",
    "achievable_range",
    "apply_formula",
    "clamp",
    "decode_value",
    "encode_value",
]
