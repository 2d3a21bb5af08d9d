"""Signal Set - decode and validate OBD-II signal-set definitions."""

__version__ = "0.1.0"

from signalset.config import DecoderConfig, LoadPolicy, ValidationConfig
from signalset.core.bitfield import extract_bits, insert_bits
from signalset.decoder.decoder import DecodedResponse, DecodedSignal, ResponseDecoder
from signalset.errors import IssueKind, SignalSetError, SignalSetRejected
from signalset.loader.loader import load_signalset, load_signalset_file, validate_document
from signalset.scaling.engine import EnumValue, Measurement, decode_value, encode_value
from signalset.schema.command import Command, Signal, SignalSet
from signalset.schema.format import SignalFormat
from signalset.validation.events import ValidationReport
from signalset.validation.format_checks import check_format

__all__ = [
    "DecoderConfig",
    "LoadPolicy",
    "ValidationConfig",
    "extract_bits",
    "insert_bits",
    "DecodedResponse",
    "DecodedSignal",
    "ResponseDecoder",
    "IssueKind",
    "SignalSetError",
    "SignalSetRejected",
    "load_signalset",
    "load_signalset_file",
    "validate_document",
    "EnumValue",
    "Measurement",
    "decode_value",
    "encode_value",
    "Command",
    "Signal",
    "SignalSet",
    "SignalFormat",
    "ValidationReport",
    "check_format",
]
