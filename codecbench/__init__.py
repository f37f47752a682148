"""
Round-trip benchmark harness for lossless image codecs.

Generates a deterministic 8K 12-bit mono workload, times repeated encode and
decode calls, verifies the round trip bit-for-bit, and prints a report that
ends in a machine-parsable SUMMARY line.

Usage:
    python -m codecbench
    python -m codecbench 25 --output ./results
"""

from codecbench.timing import TimingRecord, TimingContext, SampleSet
from codecbench.image import FrameInfo, DEFAULT_FRAME, generate, generate_test_image
from codecbench.metrics import (
    PhaseStats,
    BenchmarkReport,
    MetricsCollector,
    SystemInfo,
    compression_ratio,
    throughput_mb_s,
)
from codecbench.errors import CodecError, ErrorKind, RunOutcome, UsageError
from codecbench.codec import CodecAdapter, JpegLsCodec
from codecbench.verify import VerificationResult, verify_round_trip
from codecbench.session import BenchmarkConfig, BenchmarkSession
from codecbench.report import ReportGenerator, parse_summary_line, summary_line

__all__ = [
    # Timing primitives
    "TimingRecord",
    "TimingContext",
    "SampleSet",
    # Workload
    "FrameInfo",
    "DEFAULT_FRAME",
    "generate",
    "generate_test_image",
    # Metrics
    "PhaseStats",
    "BenchmarkReport",
    "MetricsCollector",
    "SystemInfo",
    "compression_ratio",
    "throughput_mb_s",
    # Errors
    "CodecError",
    "ErrorKind",
    "RunOutcome",
    "UsageError",
    # Codec
    "CodecAdapter",
    "JpegLsCodec",
    # Verification
    "VerificationResult",
    "verify_round_trip",
    # Session management
    "BenchmarkConfig",
    "BenchmarkSession",
    # Reporting
    "ReportGenerator",
    "parse_summary_line",
    "summary_line",
]
