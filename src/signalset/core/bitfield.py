"""Bit-field extraction and insertion over byte buffers.

Bit positions count from the most significant bit of the first byte, so
bit 0 is the top bit of buffer[0] and bit 8 is the top bit of buffer[1].
"""

from __future__ import annotations

from signalset.errors import InvalidBitLengthError, OutOfRangeError


MAX_BIT_LENGTH = 64


def _check_field(bit_offset: int, bit_length: int) -> None:
    if bit_offset < 0:
        raise InvalidBitLengthError(f"Bit offset must be non-negative, got {bit_offset}")
    if not (1 <= bit_length <= MAX_BIT_LENGTH):
        raise InvalidBitLengthError(
            f"Bit length must be 1-{MAX_BIT_LENGTH}, got {bit_length}"
        )


def _check_fits(buffer: bytes, bit_offset: int, bit_length: int) -> None:
    if bit_offset + bit_length > len(buffer) * 8:
        raise OutOfRangeError(bit_offset, bit_length, len(buffer))


def raw_domain(bit_length: int, signed: bool = False) -> tuple[int, int]:
    """Return the inclusive (low, high) range of raw integers for a field."""
    if not (1 <= bit_length <= MAX_BIT_LENGTH):
        raise InvalidBitLengthError(
            f"Bit length must be 1-{MAX_BIT_LENGTH}, got {bit_length}"
        )
    if signed:
        half = 1 << (bit_length - 1)
        return -half, half - 1
    return 0, (1 << bit_length) - 1


def extract_bits(
    buffer: bytes,
    bit_offset: int,
    bit_length: int,
    signed: bool = False,
) -> int:
    """Read an integer field from a buffer, most significant bit first.

    Args:
        buffer: Response bytes, most significant byte first.
        bit_offset: Position of the field's first (top) bit.
        bit_length: Field width in bits (1-64).
        signed: Interpret the field as two's complement.

    Raises:
        InvalidBitLengthError: If the offset or length is invalid.
        OutOfRangeError: If the field extends past the end of the buffer.
    """
    _check_field(bit_offset, bit_length)
    _check_fits(buffer, bit_offset, bit_length)

    total_bits = len(buffer) * 8
    shift = total_bits - bit_offset - bit_length
    mask = (1 << bit_length) - 1
    value = (int.from_bytes(buffer, byteorder="big") >> shift) & mask

    if signed and value & (1 << (bit_length - 1)):
        value -= 1 << bit_length

    return value


def insert_bits(
    buffer: bytes,
    bit_offset: int,
    bit_length: int,
    value: int,
    signed: bool = False,
) -> bytes:
    """Return a copy of buffer with the field replaced by value.

    Bits outside the field are preserved.

    Raises:
        InvalidBitLengthError: If the offset or length is invalid.
        OutOfRangeError: If the field extends past the end of the buffer.
        ValueError: If value does not fit in the field.
    """
    _check_field(bit_offset, bit_length)
    _check_fits(buffer, bit_offset, bit_length)

    low, high = raw_domain(bit_length, signed)
    if not (low <= value <= high):
        raise ValueError(
            f"Value {value} does not fit in a {bit_length}-bit "
            f"{'signed' if signed else 'unsigned'} field [{low}, {high}]"
        )

    mask = (1 << bit_length) - 1
    pattern = value & mask

    total_bits = len(buffer) * 8
    shift = total_bits - bit_offset - bit_length
    current = int.from_bytes(buffer, byteorder="big")
    current &= ~(mask << shift)
    current |= pattern << shift

    return current.to_bytes(len(buffer), byteorder="big")


def bytes_needed(bit_offset: int, bit_length: int) -> int:
    """Smallest buffer length, in bytes, that holds the field."""
    _check_field(bit_offset, bit_length)
    return (bit_offset + bit_length + 7) // 8
