"""
Metrics aggregation for benchmarking.
"""

from __future__ import annotations

import json
import platform
import statistics
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from codecbench.timing import SampleSet

BYTES_PER_MB = 1024 * 1024


def throughput_mb_s(raw_bytes: int, duration_ms: float) -> float:
    """Throughput in MB/s (MiB based) for processing `raw_bytes` in `duration_ms`."""
    if duration_ms <= 0:
        return float("inf")
    return raw_bytes / BYTES_PER_MB / (duration_ms / 1000.0)


def compression_ratio(raw_bytes: int, encoded_size: int) -> float:
    if encoded_size <= 0:
        return float("inf")
    return raw_bytes / encoded_size


@dataclass
class PhaseStats:
    """Statistical summary for one benchmark phase."""

    name: str
    min_ms: float
    median_ms: float
    mean_ms: float
    max_ms: float
    std_ms: float
    total_ms: float
    count: int

    @classmethod
    def from_durations(cls, name: str, durations_ms: list[float]) -> PhaseStats:
        """Create stats from a list of durations in milliseconds.

        The median is the element at index N // 2 of the sorted samples, so
        for an even count it is the upper-middle element rather than the
        mean of the two middle elements. Reported numbers depend on it.
        """
        if not durations_ms:
            raise ValueError(f"No samples recorded for phase '{name}'")

        sorted_durations = sorted(durations_ms)

        return cls(
            name=name,
            min_ms=sorted_durations[0],
            median_ms=sorted_durations[len(sorted_durations) // 2],
            mean_ms=statistics.fmean(durations_ms),
            max_ms=sorted_durations[-1],
            std_ms=statistics.stdev(durations_ms) if len(durations_ms) > 1 else 0.0,
            total_ms=sum(durations_ms),
            count=len(durations_ms),
        )

    @classmethod
    def from_samples(cls, samples: SampleSet) -> PhaseStats:
        return cls.from_durations(samples.name, samples.durations_ms)

    def throughput(self, raw_bytes: int) -> dict[str, float]:
        """Throughput for each of min/median/mean, in MB/s."""
        return {
            "min": throughput_mb_s(raw_bytes, self.min_ms),
            "median": throughput_mb_s(raw_bytes, self.median_ms),
            "mean": throughput_mb_s(raw_bytes, self.mean_ms),
        }


@dataclass
class SystemInfo:
    """System information for benchmark context."""

    codec: str
    codec_version: str
    numpy_version: str
    python_version: str
    platform: str
    machine: str

    @classmethod
    def collect(cls, codec_name: str, codec_version: str) -> SystemInfo:
        """Collect current system information."""
        import numpy

        return cls(
            codec=codec_name,
            codec_version=codec_version,
            numpy_version=numpy.__version__,
            python_version=sys.version,
            platform=platform.platform(),
            machine=platform.machine(),
        )


@dataclass
class BenchmarkReport:
    """Read-only view over a finished (or failed) run."""

    width: int
    height: int
    bits_per_sample: int
    component_count: int
    loop_count: int
    raw_size_bytes: int
    encoded_size: int
    encode_stats: PhaseStats
    decode_stats: PhaseStats | None = None
    verified: bool | None = None
    mismatch_count: int = 0
    system_info: SystemInfo | None = None

    @property
    def raw_mb(self) -> float:
        return self.raw_size_bytes / BYTES_PER_MB

    @property
    def ratio(self) -> float:
        return compression_ratio(self.raw_size_bytes, self.encoded_size)

    @property
    def encoded_percent(self) -> float:
        return self.encoded_size * 100.0 / self.raw_size_bytes

    @property
    def encode_mb_s(self) -> float:
        return throughput_mb_s(self.raw_size_bytes, self.encode_stats.median_ms)

    @property
    def decode_mb_s(self) -> float:
        if self.decode_stats is None:
            return 0.0
        return throughput_mb_s(self.raw_size_bytes, self.decode_stats.median_ms)

    def summary_values(self) -> dict[str, float]:
        """Values of the machine-parsable summary, in their fixed order."""
        if self.decode_stats is None:
            raise ValueError("Summary requires decode statistics")
        return {
            "encode_median_ms": self.encode_stats.median_ms,
            "decode_median_ms": self.decode_stats.median_ms,
            "encode_MB_s": self.encode_mb_s,
            "decode_MB_s": self.decode_mb_s,
            "ratio": self.ratio,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        phases: dict[str, Any] = {
            "encode": {**asdict(self.encode_stats), "throughput_mb_s": self.encode_stats.throughput(self.raw_size_bytes)},
        }
        if self.decode_stats is not None:
            phases["decode"] = {
                **asdict(self.decode_stats),
                "throughput_mb_s": self.decode_stats.throughput(self.raw_size_bytes),
            }
        return {
            "frame": {
                "width": self.width,
                "height": self.height,
                "bits_per_sample": self.bits_per_sample,
                "component_count": self.component_count,
            },
            "loop_count": self.loop_count,
            "raw_size_bytes": self.raw_size_bytes,
            "encoded_size": self.encoded_size,
            "compression_ratio": self.ratio,
            "phases": phases,
            "verified": self.verified,
            "mismatch_count": self.mismatch_count,
            "system_info": asdict(self.system_info) if self.system_info else None,
        }


@dataclass
class MetricsCollector:
    """Holds the per-phase sample sets of one run."""

    encode: SampleSet = field(default_factory=lambda: SampleSet("encode"))
    decode: SampleSet = field(default_factory=lambda: SampleSet("decode"))

    def export_json(self, path: Path) -> None:
        """Export all raw timing records to JSON."""
        data = {
            "encode": [r.to_dict() for r in self.encode],
            "decode": [r.to_dict() for r in self.decode],
        }
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

    def export_chrome_trace(self, path: Path) -> None:
        """Export timed windows as Chrome Trace format for Perfetto/Chrome DevTools.

        Format: https://docs.google.com/document/d/1CvAClvFfyA5R-PhYUmn5OOQtYMH4h6I0nSsKchNAySU
        """
        records = [*self.encode, *self.decode]
        origin_ns = min((r.start_ns for r in records), default=0)

        events = [
            {
                "name": f"{r.name}",
                "cat": "codec",
                "ph": "X",
                "ts": (r.start_ns - origin_ns) / 1000,
                "dur": r.duration_ns / 1000,
                "pid": 1,
                "tid": 1,
                "args": r.metadata,
            }
            for r in records
        ]

        trace_data = {
            "traceEvents": events,
            "displayTimeUnit": "ms",
            "metadata": {
                "benchmark": "codecbench",
            },
        }

        with open(path, "w") as f:
            json.dump(trace_data, f, indent=2)
