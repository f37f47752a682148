"""
Round-trip verification.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

MAX_REPORTED_MISMATCHES = 5


@dataclass
class Mismatch:
    index: int
    expected: int
    actual: int


@dataclass
class VerificationResult:
    total_samples: int
    mismatch_count: int = 0
    mismatches: list[Mismatch] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.mismatch_count == 0

    def lines(self) -> list[str]:
        """Diagnostic lines for a failed verification."""
        out = [f"  Mismatch at index {m.index}: expected {m.expected}, got {m.actual}" for m in self.mismatches]
        out.append(f"  Total mismatches: {self.mismatch_count} / {self.total_samples}")
        return out


def verify_round_trip(
    original: np.ndarray,
    decoded: np.ndarray,
    max_reported: int = MAX_REPORTED_MISMATCHES,
) -> VerificationResult:
    """Compare two sample buffers element-wise in row-major order."""
    expected = original.reshape(-1)
    actual = decoded.reshape(-1)
    if expected.size != actual.size:
        raise ValueError(f"Buffer sizes differ: {expected.size} != {actual.size}")

    diff = np.flatnonzero(expected != actual)
    return VerificationResult(
        total_samples=int(expected.size),
        mismatch_count=int(diff.size),
        mismatches=[Mismatch(int(i), int(expected[i]), int(actual[i])) for i in diff[:max_reported]],
    )
