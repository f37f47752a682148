#!/usr/bin/env python3
"""
CLI entry point for the benchmarking system.

Usage:
    python -m codecbench
    python -m codecbench 25
    python -m codecbench 5 --output ./results
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from codecbench.config import get_default_loop_count, get_output_dir
from codecbench.errors import EXIT_FAILURE, ErrorKind, UsageError
from codecbench.session import BenchmarkConfig, BenchmarkSession

USAGE = "Usage: codecbench [loop_count]"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the benchmark run."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def create_progress_callback():
    """Create a rich progress callback drawing on stderr, so stdout keeps only the report."""
    console = Console(stderr=True)
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    )

    task_id = None
    started = False

    def callback(current: int, total: int, message: str) -> None:
        nonlocal task_id, started

        if not started:
            progress.start()
            task_id = progress.add_task(message, total=total)
            started = True
        progress.update(task_id, completed=current, description=message)

        if current >= total:
            progress.stop()

    return callback, lambda: progress.stop() if started else None


def parse_loop_count(value: str | None) -> int:
    """Parse the optional iteration count; must be a positive integer.

    Falls back to $CODECBENCH_LOOP_COUNT (default 10) when no value is given.
    """
    if value is None:
        value = get_default_loop_count()
    try:
        loop_count = int(value)
    except ValueError:
        raise UsageError(f"Invalid loop count: {value!r}") from None
    if loop_count < 1:
        raise UsageError(f"Loop count must be positive, got {loop_count}")
    return loop_count


class ArgumentParser(argparse.ArgumentParser):
    """Reports bad arguments as UsageError instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the benchmark CLI."""
    parser = ArgumentParser(
        prog="codecbench",
        description="Benchmark a lossless codec round trip on a synthetic 8K 12-bit mono image",
    )

    parser.add_argument(
        "loop_count",
        nargs="?",
        default=None,
        help="Number of encode and decode iterations (default: 10)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Directory for summary.json, traces, charts and logs (default: $CODECBENCH_OUTPUT_DIR)",
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    try:
        args = parser.parse_args(argv)
        loop_count = parse_loop_count(args.loop_count)
    except UsageError as e:
        print(USAGE)
        logging.getLogger(__name__).debug(str(e))
        return EXIT_FAILURE

    setup_logging(args.verbose)

    try:
        config = BenchmarkConfig(
            loop_count=loop_count,
            output_dir=args.output or get_output_dir(),
        )
    except Exception as e:
        logging.exception("Invalid benchmark configuration")
        print(f"Error: {e}")
        return EXIT_FAILURE

    if args.no_progress:
        progress_callback, cleanup = None, lambda: None
    else:
        progress_callback, cleanup = create_progress_callback()

    try:
        session = BenchmarkSession(config, progress_callback=progress_callback)
        outcome = session.run()
    except KeyboardInterrupt:
        print("\nBenchmark interrupted by user")
        return 130
    finally:
        cleanup()

    if outcome.kind is ErrorKind.CODEC:
        print(f"Codec error: {outcome.message}")
    elif outcome.kind is ErrorKind.GENERIC:
        print(f"Error: {outcome.message}")
    elif outcome.kind is ErrorKind.VERIFICATION:
        logging.getLogger(__name__).error(f"Verification failed: {outcome.message}")

    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
