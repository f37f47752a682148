"""
Report formatting and artifact generation for benchmark results.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt  # noqa: E402

if TYPE_CHECKING:
    from codecbench.image import FrameInfo
    from codecbench.metrics import BenchmarkReport, MetricsCollector, PhaseStats

logger = logging.getLogger(__name__)

SUMMARY_PREFIX = "SUMMARY:"
SUMMARY_KEYS = ("encode_median_ms", "decode_median_ms", "encode_MB_s", "decode_MB_s", "ratio")


def fmt(value: float) -> str:
    """Six significant digits, the way iostreams print doubles by default."""
    return f"{value:g}"


RESOLUTION_NAMES = {
    (7680, 4320): "8K",
    (3840, 2160): "4K",
    (1920, 1080): "HD",
}


def resolution_name(frame: FrameInfo) -> str:
    return RESOLUTION_NAMES.get((frame.width, frame.height), f"{frame.width}x{frame.height}")


def header_lines(frame: FrameInfo, loop_count: int, codec_name: str) -> list[str]:
    return [
        f"=== {codec_name} {resolution_name(frame)} {frame.bits_per_sample}-Bit Mono Benchmark ===",
        f"Image: {frame.width}x{frame.height} {frame.bits_per_sample}-bit mono",
        f"Pixel count: {frame.pixel_count}",
        f"Raw size: {frame.raw_size_bytes // (1024 * 1024)} MiB",
        f"Loop count: {loop_count}",
        "",
    ]


def phase_lines(label: str, stats: PhaseStats, raw_size_bytes: int) -> list[str]:
    """min/median/mean latency lines, each with its own throughput."""
    throughput = stats.throughput(raw_size_bytes)
    return [
        f"  {label} min:    {fmt(stats.min_ms)} ms ({fmt(throughput['min'])} MB/s)",
        f"  {label} median: {fmt(stats.median_ms)} ms ({fmt(throughput['median'])} MB/s)",
        f"  {label} mean:   {fmt(stats.mean_ms)} ms ({fmt(throughput['mean'])} MB/s)",
        "",
    ]


def encode_lines(report: BenchmarkReport) -> list[str]:
    return [
        f"  Encoded size: {report.encoded_size} bytes ({fmt(report.encoded_percent)}%)",
        f"  Compression ratio: {fmt(report.ratio)}:1",
        *phase_lines("Encode", report.encode_stats, report.raw_size_bytes),
    ]


def decode_lines(report: BenchmarkReport) -> list[str]:
    if report.decode_stats is None:
        return []
    return phase_lines("Decode", report.decode_stats, report.raw_size_bytes)


def summary_line(report: BenchmarkReport) -> str:
    """Single machine-parsable line of key=value tokens in fixed order."""
    values = report.summary_values()
    tokens = " ".join(f"{key}={fmt(values[key])}" for key in SUMMARY_KEYS)
    return f"{SUMMARY_PREFIX} {tokens}"


def parse_summary_line(line: str) -> dict[str, float]:
    """Inverse of `summary_line`, for regression tooling."""
    if not line.startswith(SUMMARY_PREFIX):
        raise ValueError(f"Not a summary line: {line!r}")
    values: dict[str, float] = {}
    for token in line[len(SUMMARY_PREFIX):].split():
        key, _, raw = token.partition("=")
        values[key] = float(raw)
    return values


class ReportGenerator:
    """Writes benchmark artifacts to an output directory."""

    def __init__(
        self,
        output_dir: Path,
        collector: MetricsCollector,
        report: BenchmarkReport,
    ):
        self.output_dir = output_dir
        self.collector = collector
        self.report = report

    def generate_all(self) -> None:
        """Generate all report artifacts."""
        logger.info("Generating benchmark reports...")

        self.generate_summary_json()
        self.collector.export_json(self.output_dir / "raw_metrics.json")
        self.collector.export_chrome_trace(self.output_dir / "traces" / "benchmark_timeline.json")
        self.generate_latency_chart()

        logger.info("Report generation complete")

    def generate_summary_json(self) -> None:
        """Write the benchmark report to summary.json."""
        path = self.output_dir / "summary.json"
        with open(path, "w") as f:
            json.dump(self.report.to_dict(), f, indent=2)
        logger.info(f"Wrote summary to {path}")

    def generate_latency_chart(self) -> None:
        """Per-iteration encode/decode latency with median lines."""
        encode_ms = self.collector.encode.durations_ms
        decode_ms = self.collector.decode.durations_ms
        if not encode_ms:
            logger.warning("No timing samples available for latency chart")
            return

        fig, ax = plt.subplots(figsize=(10, 6))

        ax.plot(range(1, len(encode_ms) + 1), encode_ms, marker="o", color="#3498db", label="Encode")
        ax.axhline(
            self.report.encode_stats.median_ms,
            color="#3498db", linestyle="--", linewidth=1,
            label=f"Encode median: {self.report.encode_stats.median_ms:.1f}ms",
        )
        if decode_ms and self.report.decode_stats is not None:
            ax.plot(range(1, len(decode_ms) + 1), decode_ms, marker="s", color="#e74c3c", label="Decode")
            ax.axhline(
                self.report.decode_stats.median_ms,
                color="#e74c3c", linestyle="--", linewidth=1,
                label=f"Decode median: {self.report.decode_stats.median_ms:.1f}ms",
            )

        ax.set_xlabel("Iteration")
        ax.set_ylabel("Time (ms)")
        ax.set_title("Round-Trip Latency per Iteration")
        ax.legend()

        plt.tight_layout()
        chart_path = self.output_dir / "charts" / "latency_distribution.png"
        plt.savefig(chart_path, dpi=150)
        plt.close(fig)
        logger.info(f"Saved latency chart to {chart_path}")
