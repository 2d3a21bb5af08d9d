"""Canonical JSON output for signal sets.

The canonical form orders commands by header, request and model-year
filter, keeps signals in document order, writes keys in a fixed order,
and leaves out fields that hold their default value.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from signalset.schema.command import Command, SignalSet


def _command_sort_key(command: Command) -> tuple:
    years = command.model_year_filter
    year_from = years.year_from if years and years.year_from is not None else -1
    year_to = years.year_to if years and years.year_to is not None else 10_000
    return int(command.header, 16), command.request.wire, year_from, year_to


def to_document(signalset: SignalSet) -> Dict[str, Any]:
    """Return the canonical document for a signal set."""
    commands = sorted(signalset.commands, key=_command_sort_key)
    d = dict(signalset.meta)
    d["commands"] = [c.to_dict() for c in commands]
    return d


def dumps(signalset: SignalSet) -> str:
    """Serialize a signal set to canonical JSON text (with trailing newline)."""
    return json.dumps(to_document(signalset), indent=2, ensure_ascii=False) + "\n"
