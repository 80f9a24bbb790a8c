from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TaskStatus(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class CommandResult:
    task_id: str
    index: int
    command: str
    # None when the command could not be started at all
    returncode: int | None
    duration_s: float

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class TaskResult:
    task_id: str
    status: TaskStatus
    commands: tuple[CommandResult, ...]
    duration_s: float

    @property
    def returncode(self) -> int | None:
        if not self.commands:
            return 0
        return self.commands[-1].returncode


@dataclass(frozen=True)
class CommandFailure:
    task_id: str
    index: int
    command: str
    returncode: int | None

    def __str__(self) -> str:
        if self.returncode is None:
            status = "could not be started"
        else:
            status = f"exited with code {self.returncode}"
        return f"Task '{self.task_id}' command #{self.index + 1} {status}: {self.command}"


@dataclass(frozen=True)
class RunResult:
    order: list[str]
    results: dict[str, TaskResult]
    skipped: list[str]
    failure: CommandFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def failed(self) -> list[str]:
        return [] if self.failure is None else [self.failure.task_id]
