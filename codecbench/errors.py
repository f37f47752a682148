"""
Error taxonomy and run outcomes.

Orchestration steps never let exceptions reach the CLI: the session turns
them into a `RunOutcome` whose kind selects the message and exit status.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codecbench.metrics import BenchmarkReport


class CodecError(RuntimeError):
    """Failure signalled by a codec adapter (bad configuration, buffer too small, ...)."""


class UsageError(ValueError):
    """Invalid command-line input."""


class ErrorKind(enum.Enum):
    USAGE = "usage"
    CODEC = "codec"
    GENERIC = "generic"
    VERIFICATION = "verification"


EXIT_SUCCESS = 0
EXIT_FAILURE = 1

EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.USAGE: EXIT_FAILURE,
    ErrorKind.CODEC: EXIT_FAILURE,
    ErrorKind.GENERIC: EXIT_FAILURE,
    ErrorKind.VERIFICATION: EXIT_FAILURE,
}


@dataclass
class RunOutcome:
    """Result of a benchmark run; `kind` is None on success."""

    kind: ErrorKind | None = None
    message: str = ""
    report: BenchmarkReport | None = None

    @property
    def ok(self) -> bool:
        return self.kind is None

    @property
    def exit_code(self) -> int:
        if self.kind is None:
            return EXIT_SUCCESS
        return EXIT_CODES[self.kind]

    @classmethod
    def from_exception(cls, exc: Exception, report: BenchmarkReport | None = None) -> RunOutcome:
        kind = ErrorKind.CODEC if isinstance(exc, CodecError) else ErrorKind.GENERIC
        return cls(kind=kind, message=str(exc), report=report)
