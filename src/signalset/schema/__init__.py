"""Declarative signal-set records."""

from signalset.schema.enums import Category, Unit
from signalset.schema.format import EnumEntry, SignalFormat
from signalset.schema.command import (
    Command,
    ModelYearFilter,
    ServiceRequest,
    Signal,
    SignalSet,
)

__all__ = [
    "Category",
    "Unit",
    "EnumEntry",
    "SignalFormat",
    "Command",
    "ModelYearFilter",
    "ServiceRequest",
    "Signal",
    "SignalSet",
]
