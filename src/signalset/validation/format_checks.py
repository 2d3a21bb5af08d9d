"""Load-time checks for a single signal format."""

from __future__ import annotations

from fractions import Fraction
from typing import Optional

from signalset.config import ValidationConfig
from signalset.core.bitfield import MAX_BIT_LENGTH, raw_domain
from signalset.errors import IssueKind
from signalset.scaling.engine import achievable_range, apply_formula
from signalset.schema.format import Number, SignalFormat, compact_number
from signalset.validation.events import Severity, ValidationIssue


# Largest denominator suggested when rewriting a fractional multiplier
MAX_SUGGESTED_DIVISOR = 1000


def integer_divisor_form(
    fmt: SignalFormat,
    config: Optional[ValidationConfig] = None,
) -> Optional[tuple[int, Number]]:
    """Return (multiplier, divisor) with an integer multiplier, if one exists.

    ``mul: 0.5`` becomes ``(1, 2)``; ``mul: 0.15`` becomes ``(3, 20)``.
    Returns None for integer multipliers or when no small fraction matches.
    """
    config = config or ValidationConfig()
    multiplier = float(fmt.multiplier)
    if multiplier.is_integer():
        return None

    frac = Fraction(multiplier).limit_denominator(MAX_SUGGESTED_DIVISOR)
    if frac.denominator == 1 or not config.close(float(frac), multiplier):
        return None

    return frac.numerator, compact_number(fmt.divisor * frac.denominator)


def _bound_on_grid(bound: Number, fmt: SignalFormat, config: ValidationConfig) -> bool:
    if fmt.multiplier == 0:
        return config.close(bound, fmt.offset)

    low, high = raw_domain(fmt.bit_length, fmt.signed)
    raw = round((bound - fmt.offset) * fmt.divisor / fmt.multiplier)
    raw = min(max(raw, low), high)
    return config.close(apply_formula(raw, fmt), bound)


def check_format(
    fmt: SignalFormat,
    signal_id: Optional[str] = None,
    config: Optional[ValidationConfig] = None,
) -> list[ValidationIssue]:
    """Validate a signal format and return every issue found.

    Fatal kinds: InvalidBitLength, DegenerateDivisor, UnachievableBound.
    Advisories (when ``config.lint`` is set): FractionalMultiplier, OffGridBound.
    Enumerated formats only get the bit-layout check.
    """
    config = config or ValidationConfig()
    issues: list[ValidationIssue] = []

    def report(kind: IssueKind, message: str, severity: Severity = Severity.ERROR) -> None:
        issues.append(ValidationIssue(kind, message, severity, signal_id=signal_id))

    layout_ok = True
    if fmt.bit_offset < 0:
        report(IssueKind.INVALID_BIT_LENGTH, f"Bit offset must be non-negative, got {fmt.bit_offset}")
        layout_ok = False
    if not (1 <= fmt.bit_length <= MAX_BIT_LENGTH):
        report(
            IssueKind.INVALID_BIT_LENGTH,
            f"Bit length must be 1-{MAX_BIT_LENGTH}, got {fmt.bit_length}",
        )
        layout_ok = False

    if fmt.is_enum:
        return issues

    if fmt.divisor == 0:
        report(IssueKind.DEGENERATE_DIVISOR, "Divisor must be non-zero")
        return issues

    if config.lint:
        suggestion = integer_divisor_form(fmt, config)
        if suggestion is not None:
            mul, div = suggestion
            form = f"div: {div}" if mul == 1 else f"mul: {mul}, div: {div}"
            report(
                IssueKind.FRACTIONAL_MULTIPLIER,
                f"mul: {fmt.multiplier:g} is clearer as {form}",
                Severity.WARNING,
            )

    if not layout_ok:
        return issues

    low, high = achievable_range(fmt)
    for name, bound in (("min", fmt.min_clamp), ("max", fmt.max_clamp)):
        if bound is None:
            continue

        outside = (bound > high and not config.close(bound, high)) or (
            bound < low and not config.close(bound, low)
        )
        if outside:
            report(
                IssueKind.UNACHIEVABLE_BOUND,
                f"{name}: {bound:g} is outside the achievable range "
                f"[{low:g}, {high:g}] of a {fmt.bit_length}-bit "
                f"{'signed' if fmt.signed else 'unsigned'} field",
            )
        elif config.lint and not _bound_on_grid(bound, fmt, config):
            report(
                IssueKind.OFF_GRID_BOUND,
                f"{name}: {bound:g} is not produced by any raw value",
                Severity.WARNING,
            )

    return issues
