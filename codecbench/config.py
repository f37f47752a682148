import os
from pathlib import Path

DEFAULT_LOOP_COUNT = "10"


def get_output_dir() -> Path | None:
    """Get the configured artifact directory path, if any."""
    # Unset means no artifacts are written
    output_dir = os.environ.get("CODECBENCH_OUTPUT_DIR")
    return Path(output_dir) if output_dir else None


def get_default_loop_count() -> str:
    """Get the raw iteration count used when none is given on the command line.

    Validated by the CLI the same way as the positional argument.
    """
    return os.environ.get("CODECBENCH_LOOP_COUNT", DEFAULT_LOOP_COUNT)
