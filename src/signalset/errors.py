"""Error taxonomy and exception types."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from signalset.validation.events import ValidationReport


class IssueKind(Enum):
    """Every failure or advisory the toolkit can report."""

    # Decode-time
    OUT_OF_RANGE = "OutOfRange"
    UNMAPPED_ENUM = "UnmappedEnum"

    # Format validation
    UNACHIEVABLE_BOUND = "UnachievableBound"
    DEGENERATE_DIVISOR = "DegenerateDivisor"
    INVALID_BIT_LENGTH = "InvalidBitLength"

    # Structural validation
    DUPLICATE_SIGNAL_ID = "DuplicateSignalId"
    UNKNOWN_CATEGORY = "UnknownCategory"
    ORPHANED_DIAGNOSTIC_OUT = "OrphanedDiagnosticOut"
    MALFORMED_DIAGNOSTIC_CODE = "MalformedDiagnosticCode"
    INVERTED_YEAR_RANGE = "InvertedYearRange"
    MALFORMED_HEADER = "MalformedHeader"
    MALFORMED_SERVICE_REQUEST = "MalformedServiceRequest"
    INVALID_POLL_FREQUENCY = "InvalidPollFrequency"
    UNKNOWN_UNIT = "UnknownUnit"
    MISSING_VEHICLE_PREFIX = "MissingVehiclePrefix"
    MALFORMED_DOCUMENT = "MalformedDocument"

    # Advisories
    FRACTIONAL_MULTIPLIER = "FractionalMultiplier"
    OFF_GRID_BOUND = "OffGridBound"
    OVERLAPPING_SIGNALS = "OverlappingSignals"


class SignalSetError(Exception):
    """Base exception for all signal-set errors.

    Attributes:
        kind: The issue kind this error corresponds to, when there is one.
    """

    kind: Optional[IssueKind] = None

    def __init__(self, message: str, kind: Optional[IssueKind] = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class DecodeError(SignalSetError):
    """Raised when a single value cannot be decoded or encoded."""


class OutOfRangeError(DecodeError):
    """Raised when a bit field extends past the end of the buffer."""

    kind = IssueKind.OUT_OF_RANGE

    def __init__(self, bit_offset: int, bit_length: int, buffer_length: int) -> None:
        super().__init__(
            f"Bit field [{bit_offset}, {bit_offset + bit_length}) exceeds "
            f"{buffer_length}-byte buffer ({buffer_length * 8} bits)"
        )
        self.bit_offset = bit_offset
        self.bit_length = bit_length
        self.buffer_length = buffer_length


class UnmappedEnumError(DecodeError):
    """Raised when a raw value (or symbol, when encoding) has no enum entry."""

    kind = IssueKind.UNMAPPED_ENUM

    def __init__(self, value: object) -> None:
        super().__init__(f"No enum entry for {value!r}")
        self.value = value


class FormatError(SignalSetError):
    """Raised when a signal format cannot be used at all."""


class InvalidBitLengthError(FormatError):
    """Raised for bit lengths outside 1..64 or negative bit offsets."""

    kind = IssueKind.INVALID_BIT_LENGTH


class SignalSetRejected(SignalSetError):
    """Raised when a document fails validation under the reject policy.

    Attributes:
        report: The full validation report for the document.
    """

    def __init__(self, report: ValidationReport) -> None:
        count = len(report.errors)
        super().__init__(f"Signal set rejected with {count} error(s)")
        self.report = report
