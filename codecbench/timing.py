"""
Core timing primitives for the benchmarking system.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class TimingRecord:
    """A single timing measurement."""

    name: str
    start_ns: int
    end_ns: int
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ns(self) -> int:
        """Duration in nanoseconds."""
        return self.end_ns - self.start_ns

    @property
    def duration_ms(self) -> float:
        """Duration in milliseconds."""
        return self.duration_ns / 1_000_000

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "start_ns": self.start_ns,
            "end_ns": self.end_ns,
            "duration_ms": self.duration_ms,
            "metadata": self.metadata,
        }


class SampleSet:
    """Arrival-ordered timing samples for one phase (encode or decode).

    Append-only: statistics are computed from a sorted copy.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._records: list[TimingRecord] = []

    def record(self, record: TimingRecord) -> None:
        self._records.append(record)

    def time(self, **metadata: Any) -> TimingContext:
        """Create a timing context manager that appends to this set."""
        return TimingContext(self.name, self, **metadata)

    @property
    def records(self) -> list[TimingRecord]:
        return list(self._records)

    @property
    def durations_ms(self) -> list[float]:
        return [r.duration_ms for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TimingRecord]:
        return iter(list(self._records))


class TimingContext:
    """Context manager for timing code blocks.

    Usage:
        with encode_samples.time(iteration=3):
            encoded_size = codec.encode(image, frame, destination)
    """

    def __init__(self, name: str, samples: SampleSet, **metadata: Any):
        self.name = name
        self.samples = samples
        self.metadata = metadata
        self._start_ns: int = 0
        self._record: TimingRecord | None = None

    def __enter__(self) -> TimingContext:
        self._start_ns = time.perf_counter_ns()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        end_ns = time.perf_counter_ns()
        # A failed call is not a sample
        if exc_type is not None:
            return
        self._record = TimingRecord(
            name=self.name,
            start_ns=self._start_ns,
            end_ns=end_ns,
            metadata=self.metadata,
        )
        self.samples.record(self._record)

    @property
    def record(self) -> TimingRecord | None:
        """Get the timing record after context exit."""
        return self._record

