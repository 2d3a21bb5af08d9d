"""Loading, validating and writing signal-set documents."""

from signalset.loader.loader import (
    LoadResult,
    SignalSetLoader,
    load_signalset,
    load_signalset_file,
    validate_document,
)
from signalset.loader.serializer import dumps, to_document

__all__ = [
    "LoadResult",
    "SignalSetLoader",
    "load_signalset",
    "load_signalset_file",
    "validate_document",
    "dumps",
    "to_document",
]
