"""Validation issue and report definitions."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Optional

from signalset.errors import IssueKind


class Severity(Enum):
    """Severity level for validation issues."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found while validating a signal-set document.

    Attributes:
        kind: What went wrong.
        message: Human-readable explanation.
        severity: ERROR issues are fatal; WARNING and INFO are advisories.
        signal_id: Offending signal, when the issue is about a signal.
        command: Offending command as "HDR REQUEST" or "commands[i]".
    """

    kind: IssueKind
    message: str
    severity: Severity = Severity.ERROR
    signal_id: Optional[str] = None
    command: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    @property
    def subject(self) -> str:
        return self.signal_id or self.command or "document"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "signal_id": self.signal_id,
            "command": self.command,
            "message": self.message,
        }

    def __str__(self) -> str:
        return f"{self.severity.value.upper()} {self.kind.value} [{self.subject}]: {self.message}"


@dataclass
class ValidationReport:
    """All issues found in one document, in discovery order."""

    issues: list[ValidationIssue] = field(default_factory=list)

    def add(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def extend(self, issues: Iterable[ValidationIssue]) -> None:
        self.issues.extend(issues)

    def __iter__(self) -> Iterator[ValidationIssue]:
        return iter(self.issues)

    def __len__(self) -> int:
        return len(self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.is_error]

    @property
    def advisories(self) -> list[ValidationIssue]:
        return [i for i in self.issues if not i.is_error]

    @property
    def ok(self) -> bool:
        """True when there are no fatal issues."""
        return not self.errors

    def summary(self) -> Dict[str, Any]:
        by_severity = Counter(i.severity.value for i in self.issues)
        by_kind = Counter(i.kind.value for i in self.issues)
        return {
            "total_issues": len(self.issues),
            "errors": len(self.errors),
            "advisories": len(self.advisories),
            "by_severity": dict(by_severity),
            "by_kind": dict(by_kind),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "summary": self.summary(),
            "issues": [i.to_dict() for i in self.issues],
        }
