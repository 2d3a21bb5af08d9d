"""Configuration for loading and decoding signal sets."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LoadPolicy(Enum):
    """What the loader does with a document that has validation errors."""

    REJECT = "reject"
    SKIP = "skip"


@dataclass(frozen=True)
class ValidationConfig:
    """Configuration for signal-set validation.

    Attributes:
        rel_tol: Relative tolerance for reachability checks on min/max bounds.
        abs_tol: Absolute tolerance floor, used for bounds close to zero.
        vehicle_prefix: When set, every signal id must start with "<prefix>_".
        lint: Emit advisory (non-fatal) issues.
        policy: Reject the whole document, or skip offending signals.
    """

    rel_tol: float = 1e-6
    abs_tol: float = 1e-9
    vehicle_prefix: Optional[str] = None
    lint: bool = True
    policy: LoadPolicy = LoadPolicy.REJECT

    def __post_init__(self) -> None:
        if self.rel_tol < 0 or self.abs_tol < 0:
            raise ValueError("Tolerances must be non-negative")

    def close(self, a: float, b: float) -> bool:
        """Return True if two values are equal within the configured tolerance."""
        return math.isclose(a, b, rel_tol=self.rel_tol, abs_tol=self.abs_tol)


@dataclass(frozen=True)
class DecoderConfig:
    """Configuration for the response decoder.

    Attributes:
        substitute_unknown_enum: Replace unmapped enum values with a sentinel
            instead of leaving the value empty. Quality stays UNMAPPED_ENUM.
        unknown_label: Label of the sentinel.
        unknown_symbol: Symbol of the sentinel.
    """

    substitute_unknown_enum: bool = False
    unknown_label: str = "Unknown"
    unknown_symbol: str = "UNKNOWN"
