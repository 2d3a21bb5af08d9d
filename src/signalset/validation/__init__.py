"""Load-time validation of signal formats and documents."""

from signalset.validation.events import Severity, ValidationIssue, ValidationReport
from signalset.validation.format_checks import check_format, integer_divisor_form
from signalset.validation.document_checks import DocumentChecker

__all__ = [
    "Severity",
    "ValidationIssue",
    "ValidationReport",
    "check_format",
    "integer_divisor_form",
    "DocumentChecker",
]
