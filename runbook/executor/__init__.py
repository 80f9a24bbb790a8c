from .executor import Executor
from .types import CommandFailure, CommandResult, RunResult, TaskResult, TaskStatus

__all__ = [
    "Executor",
    "CommandFailure",
    "CommandResult",
    "RunResult",
    "TaskResult",
    "TaskStatus",
]
