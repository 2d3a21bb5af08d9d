"""Signal-set document loading."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from signalset.config import LoadPolicy, ValidationConfig
from signalset.errors import IssueKind, SignalSetRejected
from signalset.schema.command import Command, Signal, SignalSet
from signalset.validation.document_checks import DocumentChecker, command_label
from signalset.validation.events import ValidationIssue, ValidationReport
from signalset.validation.format_checks import check_format


logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """A loaded signal set and the report produced while loading it."""

    signalset: SignalSet
    report: ValidationReport = field(default_factory=ValidationReport)

    @property
    def ok(self) -> bool:
        return self.report.ok


class SignalSetLoader:
    """Builds a :class:`SignalSet` from a parsed JSON document.

    Every check runs before anything is rejected, so one load reports all
    problems in the document. What happens next depends on the policy:

    - ``LoadPolicy.REJECT`` raises :class:`SignalSetRejected` if the report
      has any error.
    - ``LoadPolicy.SKIP`` drops offending signals (and commands whose own
      fields are invalid) and returns what is left together with the report.
    """

    def __init__(self, config: Optional[ValidationConfig] = None) -> None:
        self._config = config or ValidationConfig()

    @property
    def config(self) -> ValidationConfig:
        return self._config

    def load(self, data: Any) -> LoadResult:
        """Validate and load an already-parsed document."""
        checker = DocumentChecker(self._config)
        report = ValidationReport()

        root_issues = checker.check_root(data)
        if root_issues:
            report.extend(root_issues)
            return self._finish(SignalSet(), report)

        commands: list[Command] = []
        for index, raw_command in enumerate(data["commands"]):
            command = self._load_command(raw_command, index, checker, report)
            if command is not None:
                commands.append(command)

        meta = {k: v for k, v in data.items() if k != "commands"}
        return self._finish(SignalSet(commands=tuple(commands), meta=meta), report)

    def load_file(self, path: Path | str) -> LoadResult:
        """Read, validate and load a JSON document from disk."""
        path = Path(path)
        logger.debug("Loading signal set from %s", path)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            report = ValidationReport(
                [ValidationIssue(IssueKind.MALFORMED_DOCUMENT, f"Invalid JSON: {e}")]
            )
            return self._finish(SignalSet(), report)

        return self.load(data)

    def _load_command(
        self,
        raw: Any,
        index: int,
        checker: DocumentChecker,
        report: ValidationReport,
    ) -> Optional[Command]:
        label = command_label(raw, index)
        command_issues = checker.check_command(raw, index)
        report.extend(command_issues)

        raw_signals = raw.get("signals", []) if isinstance(raw, dict) else []
        if not isinstance(raw_signals, list):
            raw_signals = []

        # Signals are checked even when the command itself is bad
        signals: list[Signal] = []
        for raw_signal in raw_signals:
            signal = self._load_signal(raw_signal, label, checker, report)
            if signal is not None:
                signals.append(signal)

        if any(i.is_error for i in command_issues):
            logger.warning("Dropping command %s with invalid fields", label)
            return None

        try:
            command = Command.from_dict(raw, signals=signals)
        except (KeyError, TypeError, ValueError) as e:
            report.add(ValidationIssue(IssueKind.MALFORMED_DOCUMENT, str(e), command=label))
            return None

        report.extend(checker.check_overlaps(command))
        return command

    def _load_signal(
        self,
        raw: Any,
        label: str,
        checker: DocumentChecker,
        report: ValidationReport,
    ) -> Optional[Signal]:
        issues = checker.check_signal(raw, command=label)
        report.extend(issues)
        if any(i.is_error for i in issues):
            return None

        try:
            signal = Signal.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            report.add(
                ValidationIssue(
                    IssueKind.MALFORMED_DOCUMENT,
                    f"Invalid signal definition: {e}",
                    signal_id=raw.get("id"),
                    command=label,
                )
            )
            return None

        format_issues = check_format(signal.format, signal.id, self._config)
        report.extend(
            ValidationIssue(i.kind, i.message, i.severity, signal_id=i.signal_id, command=label)
            for i in format_issues
        )
        if any(i.is_error for i in format_issues):
            return None

        return signal

    def _finish(self, signalset: SignalSet, report: ValidationReport) -> LoadResult:
        logger.info(
            "Loaded %d command(s), %d signal(s): %d error(s), %d advisory issue(s)",
            len(signalset),
            signalset.signal_count,
            len(report.errors),
            len(report.advisories),
        )

        if not report.ok and self._config.policy == LoadPolicy.REJECT:
            raise SignalSetRejected(report)

        for issue in report.errors:
            logger.debug("Skipped: %s", issue)

        return LoadResult(signalset=signalset, report=report)


def load_signalset(data: Any, config: Optional[ValidationConfig] = None) -> LoadResult:
    """Validate and load an already-parsed document."""
    return SignalSetLoader(config).load(data)


def load_signalset_file(path: Path | str, config: Optional[ValidationConfig] = None) -> LoadResult:
    """Read, validate and load a JSON document from disk."""
    return SignalSetLoader(config).load_file(path)


def validate_document(data: Any, config: Optional[ValidationConfig] = None) -> ValidationReport:
    """Return the full validation report for a document without rejecting it."""
    skipping = replace(config or ValidationConfig(), policy=LoadPolicy.SKIP)
    return SignalSetLoader(skipping).load(data).report
