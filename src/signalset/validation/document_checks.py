"""Structural checks on signal-set documents.

These checks run on the parsed JSON (plain dicts and lists) rather than on
the records in :mod:`signalset.schema`, because a record cannot be built
from a field that is malformed. The loader runs them before building records.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from signalset.config import ValidationConfig
from signalset.errors import IssueKind
from signalset.schema.command import (
    DIAGNOSTIC_CODE_RE,
    HEADER_RE,
    PID_RE,
    SERVICE_RE,
    Command,
)
from signalset.schema.enums import Category, Unit
from signalset.schema.format import is_number
from signalset.validation.events import Severity, ValidationIssue


_CATEGORIES = {c.value for c in Category}
_UNITS = {u.value for u in Unit}


def command_label(raw: Any, index: int) -> str:
    """Readable name for a raw command: "7E0 221234", or "commands[3]"."""
    if isinstance(raw, dict):
        hdr = raw.get("hdr")
        cmd = raw.get("cmd")
        if isinstance(hdr, str) and isinstance(cmd, dict) and len(cmd) == 1:
            ((service, pid),) = cmd.items()
            if isinstance(pid, str):
                return f"{hdr.upper()} {service.upper()}{pid.upper()}"
    return f"commands[{index}]"


class DocumentChecker:
    """Runs structural checks over one document.

    The checker remembers every signal id it has seen, so a single instance
    must be used for exactly one document.
    """

    def __init__(self, config: Optional[ValidationConfig] = None) -> None:
        self._config = config or ValidationConfig()
        self._seen_ids: set[str] = set()

    @property
    def config(self) -> ValidationConfig:
        return self._config

    def check_root(self, data: Any) -> list[ValidationIssue]:
        if not isinstance(data, dict):
            return [ValidationIssue(IssueKind.MALFORMED_DOCUMENT, "Document must be a JSON object")]
        if not isinstance(data.get("commands"), list):
            return [
                ValidationIssue(
                    IssueKind.MALFORMED_DOCUMENT, 'Document must have a "commands" array'
                )
            ]
        return []

    def check_command(self, raw: Any, index: int) -> list[ValidationIssue]:
        """Check the command's own fields (not its signals)."""
        label = command_label(raw, index)
        issues: list[ValidationIssue] = []

        def report(kind: IssueKind, message: str) -> None:
            issues.append(ValidationIssue(kind, message, command=label))

        if not isinstance(raw, dict):
            report(IssueKind.MALFORMED_DOCUMENT, "Command must be a JSON object")
            return issues

        for key, required in (("hdr", True), ("rax", False)):
            value = raw.get(key)
            if value is None:
                if required:
                    report(IssueKind.MALFORMED_HEADER, f'Missing "{key}"')
                continue
            if not isinstance(value, str) or not HEADER_RE.fullmatch(value):
                report(IssueKind.MALFORMED_HEADER, f"{key} must be three hex digits, got {value!r}")

        cmd = raw.get("cmd")
        if not isinstance(cmd, dict) or len(cmd) != 1:
            report(
                IssueKind.MALFORMED_SERVICE_REQUEST,
                f"cmd must hold exactly one service/PID pair, got {cmd!r}",
            )
        else:
            ((service, pid),) = cmd.items()
            if not SERVICE_RE.fullmatch(service) or not isinstance(pid, str) or not PID_RE.fullmatch(pid):
                report(
                    IssueKind.MALFORMED_SERVICE_REQUEST,
                    f"cmd must map a two-digit hex service to a hex PID, got {cmd!r}",
                )

        freq = raw.get("freq", 1)
        if not is_number(freq) or freq <= 0:
            report(IssueKind.INVALID_POLL_FREQUENCY, f"freq must be a positive number, got {freq!r}")

        years = raw.get("dbgfilter")
        if years is not None:
            issues.extend(self._check_years(years, label))

        if not isinstance(raw.get("signals", []), list):
            report(IssueKind.MALFORMED_DOCUMENT, '"signals" must be an array')

        return issues

    def _check_years(self, years: Any, label: str) -> list[ValidationIssue]:
        if not isinstance(years, dict):
            return [
                ValidationIssue(
                    IssueKind.MALFORMED_DOCUMENT, "dbgfilter must be an object", command=label
                )
            ]

        bounds: Dict[str, int] = {}
        for key in ("from", "to"):
            value = years.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                return [
                    ValidationIssue(
                        IssueKind.MALFORMED_DOCUMENT,
                        f"dbgfilter.{key} must be an integer year, got {value!r}",
                        command=label,
                    )
                ]
            bounds[key] = value

        if "from" in bounds and "to" in bounds and bounds["from"] > bounds["to"]:
            return [
                ValidationIssue(
                    IssueKind.INVERTED_YEAR_RANGE,
                    f"dbgfilter from {bounds['from']} is after to {bounds['to']}",
                    command=label,
                )
            ]
        return []

    def check_signal(self, raw: Any, command: Optional[str] = None) -> list[ValidationIssue]:
        """Check a signal's identifier and metadata fields.

        Records the signal id, so a repeated id is reported on every
        occurrence after the first.
        """
        if not isinstance(raw, dict):
            return [
                ValidationIssue(
                    IssueKind.MALFORMED_DOCUMENT, "Signal must be a JSON object", command=command
                )
            ]

        signal_id = raw.get("id")
        if not isinstance(signal_id, str) or not signal_id:
            return [
                ValidationIssue(
                    IssueKind.MALFORMED_DOCUMENT,
                    f"Signal id must be a non-empty string, got {signal_id!r}",
                    command=command,
                )
            ]

        issues: list[ValidationIssue] = []

        def report(kind: IssueKind, message: str) -> None:
            issues.append(ValidationIssue(kind, message, signal_id=signal_id, command=command))

        if signal_id in self._seen_ids:
            report(IssueKind.DUPLICATE_SIGNAL_ID, f"Signal id {signal_id} is already defined")
        self._seen_ids.add(signal_id)

        prefix = self._config.vehicle_prefix
        if prefix and not signal_id.startswith(f"{prefix}_"):
            report(IssueKind.MISSING_VEHICLE_PREFIX, f"Signal id must start with {prefix}_")

        path = raw.get("path")
        if not isinstance(path, str) or path not in _CATEGORIES:
            report(IssueKind.UNKNOWN_CATEGORY, f"Unknown path {path!r}")

        fmt = raw.get("fmt")
        if not isinstance(fmt, dict):
            report(IssueKind.MALFORMED_DOCUMENT, f"fmt must be an object, got {fmt!r}")
        else:
            unit = fmt.get("unit")
            if unit is not None and (not isinstance(unit, str) or unit not in _UNITS):
                report(IssueKind.UNKNOWN_UNIT, f"Unknown unit {unit!r}")

        din = raw.get("din")
        dout = raw.get("dout")
        for key, value in (("din", din), ("dout", dout)):
            if value is not None and (
                not isinstance(value, str) or not DIAGNOSTIC_CODE_RE.fullmatch(value)
            ):
                report(
                    IssueKind.MALFORMED_DIAGNOSTIC_CODE,
                    f"{key} must be exactly two hex characters, got {value!r}",
                )
        if dout is not None and din is None:
            report(IssueKind.ORPHANED_DIAGNOSTIC_OUT, "dout is set without din")

        return issues

    def check_overlaps(self, command: Command) -> list[ValidationIssue]:
        """Advise when two signals of one command read the same bits.

        Overlap is allowed: every signal is extracted independently.
        """
        if not self._config.lint:
            return []

        label = f"{command.header} {command.request.wire}"
        issues: list[ValidationIssue] = []
        signals = list(command.signals)
        for i, a in enumerate(signals):
            for b in signals[i + 1:]:
                if a.format.bit_offset < b.format.end_bit and b.format.bit_offset < a.format.end_bit:
                    issues.append(
                        ValidationIssue(
                            IssueKind.OVERLAPPING_SIGNALS,
                            f"Bits overlap with {a.id}",
                            Severity.INFO,
                            signal_id=b.id,
                            command=label,
                        )
                    )
        return issues
