"""
Benchmark session orchestrator.

Runs the full round trip: generate the workload once, time the encode loop,
time the decode loop, verify, then report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

import numpy as np

from codecbench.codec import CodecAdapter, JpegLsCodec
from codecbench.errors import CodecError, ErrorKind, RunOutcome
from codecbench.image import DEFAULT_FRAME, DEFAULT_SEED, FrameInfo, generate_test_image
from codecbench.metrics import BenchmarkReport, MetricsCollector, PhaseStats, SystemInfo
from codecbench.report import (
    ReportGenerator,
    decode_lines,
    encode_lines,
    header_lines,
    summary_line,
)
from codecbench.verify import VerificationResult, verify_round_trip

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkConfig:
    """Configuration for a benchmark run."""

    loop_count: int = 10
    frame: FrameInfo = field(default=DEFAULT_FRAME)
    seed: int = DEFAULT_SEED

    # Artifact directory (summary.json, traces, charts, logs); None disables
    output_dir: Path | None = None

    def __post_init__(self) -> None:
        if self.loop_count < 1:
            raise ValueError(f"loop_count must be positive, got {self.loop_count}")
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)


class BenchmarkSession:
    """Manages a complete encode/decode benchmark run.

    Everything runs on the calling thread and no two timed windows overlap.
    Per-iteration encoder/decoder construction happens outside the timed
    window; the encoded and decoded buffers are allocated once and handed to
    every iteration.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        codec: CodecAdapter | None = None,
        progress_callback: Callable[[int, int, str], None] | None = None,
    ):
        """Initialize benchmark session.

        Args:
            config: Benchmark configuration
            codec: Codec adapter under test (defaults to JPEG-LS)
            progress_callback: Optional callback for progress updates.
                              Called with (current, total, message).
        """
        self.config = config
        self.codec = codec or JpegLsCodec()
        self.collector = MetricsCollector()
        self._progress_callback = progress_callback
        self._report: BenchmarkReport | None = None
        self._file_handler: logging.Handler | None = None

    @property
    def report(self) -> BenchmarkReport | None:
        return self._report

    def _report_progress(self, current: int, total: int, message: str) -> None:
        """Report progress if callback is set."""
        if self._progress_callback:
            self._progress_callback(current, total, message)

    def setup(self) -> None:
        """Create the artifact directory layout and attach the file log."""
        output_dir = self.config.output_dir
        if output_dir is None:
            return

        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / "traces").mkdir(exist_ok=True)
        (output_dir / "charts").mkdir(exist_ok=True)
        (output_dir / "logs").mkdir(exist_ok=True)

        self._file_handler = logging.FileHandler(output_dir / "logs" / "benchmark.log")
        self._file_handler.setLevel(logging.DEBUG)
        self._file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logging.getLogger().addHandler(self._file_handler)

    def teardown(self) -> None:
        if self._file_handler is not None:
            logging.getLogger().removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def run(self) -> RunOutcome:
        """Execute the full benchmark.

        Returns:
            RunOutcome whose kind is None on success. Codec failures map to
            ErrorKind.CODEC, any other exception to ErrorKind.GENERIC, and a
            round-trip difference to ErrorKind.VERIFICATION.
        """
        start_time = datetime.now()
        logger.info(f"Starting benchmark at {start_time}")

        try:
            self.setup()
            outcome = self._run()
        except CodecError as e:
            logger.error(f"Codec failure: {e}")
            return RunOutcome.from_exception(e, self._report)
        except Exception as e:
            logger.exception("Benchmark failed with error")
            return RunOutcome.from_exception(e, self._report)
        finally:
            self.teardown()

        logger.info(f"Benchmark finished in {(datetime.now() - start_time).total_seconds():.2f}s")
        return outcome

    def _run(self) -> RunOutcome:
        frame = self.config.frame
        loop_count = self.config.loop_count
        total_steps = 2 * loop_count

        for line in header_lines(frame, loop_count, self.codec.name):
            print(line)

        print(f"Generating synthetic {frame.bits_per_sample}-bit test image...")
        image = generate_test_image(frame, self.config.seed)

        # Allocated once so allocation never lands inside a timed window
        destination = bytearray(self.codec.estimate_max_encoded_size(frame))
        logger.debug(f"Preallocated {len(destination)} byte encode destination")

        print(f"Running encode benchmark ({loop_count} iterations)...")
        encoded_size = self._encode_loop(image, frame, destination)

        report = BenchmarkReport(
            width=frame.width,
            height=frame.height,
            bits_per_sample=frame.bits_per_sample,
            component_count=frame.component_count,
            loop_count=loop_count,
            raw_size_bytes=frame.raw_size_bytes,
            encoded_size=encoded_size,
            encode_stats=PhaseStats.from_samples(self.collector.encode),
            system_info=SystemInfo.collect(self.codec.name, self.codec.version),
        )
        self._report = report
        for line in encode_lines(report):
            print(line)

        print(f"Running decode benchmark ({loop_count} iterations)...")
        decoded = np.empty(image.shape, dtype=image.dtype)
        encoded = memoryview(destination)[:encoded_size]
        self._decode_loop(encoded, decoded, done=loop_count, total=total_steps)

        report.decode_stats = PhaseStats.from_samples(self.collector.decode)
        for line in decode_lines(report):
            print(line)

        verification = self.verify(image, decoded)
        report.verified = verification.passed
        report.mismatch_count = verification.mismatch_count

        if not verification.passed:
            self._generate_reports(report)
            return RunOutcome(
                kind=ErrorKind.VERIFICATION,
                message=f"{verification.mismatch_count} of {verification.total_samples} samples differ",
                report=report,
            )

        print()
        print(summary_line(report))

        self._generate_reports(report)
        return RunOutcome(report=report)

    def _encode_loop(self, image: np.ndarray, frame: FrameInfo, destination: bytearray) -> int:
        """Time `loop_count` encodes; the last iteration's size is canonical."""
        loop_count = self.config.loop_count
        encoded_size = 0

        for i in range(loop_count):
            encoder = self.codec.encoder(frame, destination)
            with self.collector.encode.time(iteration=i) as ctx:
                encoded_size = encoder.encode(image)
            logger.debug(f"Encode {i + 1}/{loop_count}: {ctx.record.duration_ms:.2f}ms, {encoded_size} bytes")
            self._report_progress(i + 1, 2 * loop_count, f"Encode {i + 1}/{loop_count}")

        return encoded_size

    def _decode_loop(self, encoded: memoryview, decoded: np.ndarray, done: int, total: int) -> None:
        loop_count = self.config.loop_count

        for i in range(loop_count):
            decoder = self.codec.decoder(encoded)
            with self.collector.decode.time(iteration=i) as ctx:
                decoder.decode(decoded)
            logger.debug(f"Decode {i + 1}/{loop_count}: {ctx.record.duration_ms:.2f}ms")
            self._report_progress(done + i + 1, total, f"Decode {i + 1}/{loop_count}")

    def verify(self, image: np.ndarray, decoded: np.ndarray) -> VerificationResult:
        """Compare source and decoded buffers and print PASS or FAIL diagnostics."""
        print("Verifying round-trip correctness... ", end="")
        result = verify_round_trip(image, decoded)
        if result.passed:
            print("PASS")
        else:
            print("FAIL")
            for line in result.lines():
                print(line)
            logger.error(f"Round trip failed: {result.mismatch_count} / {result.total_samples} samples differ")
        return result

    def _generate_reports(self, report: BenchmarkReport) -> None:
        """Write artifacts when an output directory is configured."""
        if self.config.output_dir is None:
            return

        generator = ReportGenerator(self.config.output_dir, self.collector, report)
        generator.generate_all()

        logger.info(f"Reports generated in {self.config.output_dir}")
