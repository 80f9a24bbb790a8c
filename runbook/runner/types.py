from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from runbook.executor import RunResult

EXIT_OK = 0
EXIT_FAILURE = 1


class RunState(Enum):
    IDLE = auto()
    RESOLVING = auto()
    EXECUTING = auto()
    DONE = auto()
    FAILED = auto()


def exit_status_for(returncode: int | None) -> int:
    """Process exit status that propagates a failed command's exit code."""
    if returncode is None or returncode == 0:
        return EXIT_FAILURE
    if returncode < 0:
        # Killed by a signal, reported the way a shell does
        return 128 - returncode
    if returncode > 255:
        return EXIT_FAILURE
    return returncode


@dataclass(frozen=True)
class RunOutcome:
    state: RunState
    target: str | None
    plan: list[str] = field(default_factory=list)
    result: RunResult | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.state == RunState.DONE

    @property
    def exit_status(self) -> int:
        if self.state == RunState.DONE:
            return EXIT_OK
        if self.result is not None and self.result.failure is not None:
            return exit_status_for(self.result.failure.returncode)
        return EXIT_FAILURE
